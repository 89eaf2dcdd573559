"""Runner lifecycle state machine."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Optional

from atf_common.errors import InvalidPhaseError


class RunnerPhase(str, Enum):
    """Lifecycle phases of a single run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    EXECUTED = "executed"
    REPORTED = "reported"
    FAILED = "failed"


_ALLOWED_TRANSITIONS = {
    RunnerPhase.UNINITIALIZED: {RunnerPhase.INITIALIZED},
    RunnerPhase.INITIALIZED: {RunnerPhase.EXECUTED},
    RunnerPhase.EXECUTED: {RunnerPhase.REPORTED},
    RunnerPhase.REPORTED: set(),
    RunnerPhase.FAILED: set(),
}


class RunnerStateMachine:
    """Phase tracker; FAILED is reachable from any phase."""

    def __init__(self) -> None:
        self._phase = RunnerPhase.UNINITIALIZED
        self._lock = threading.RLock()
        self._reason: Optional[str] = None
        self._callbacks: list[Callable[[RunnerPhase, Optional[str]], None]] = []

    @property
    def phase(self) -> RunnerPhase:
        with self._lock:
            return self._phase

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason

    def register_callback(
        self, callback: Callable[[RunnerPhase, Optional[str]], None]
    ) -> None:
        """Register a callback invoked on every transition."""
        self._callbacks.append(callback)

    def require(self, expected: RunnerPhase, operation: str) -> None:
        """Fail fast when ``operation`` is invoked outside ``expected``."""
        with self._lock:
            if self._phase != expected:
                raise InvalidPhaseError(
                    f"{operation}() requires phase '{expected.value}', "
                    f"runner is '{self._phase.value}'",
                    context={"operation": operation, "phase": self._phase.value},
                )

    def transition(
        self, new_phase: RunnerPhase, reason: Optional[str] = None
    ) -> RunnerPhase:
        """Move to ``new_phase``; raise InvalidPhaseError if not allowed."""
        with self._lock:
            allowed = _ALLOWED_TRANSITIONS.get(self._phase, set())
            if new_phase not in allowed and new_phase is not RunnerPhase.FAILED:
                raise InvalidPhaseError(
                    f"Invalid transition {self._phase.value} -> {new_phase.value}",
                    context={"from": self._phase.value, "to": new_phase.value},
                )
            self._phase = new_phase
            self._reason = reason
            for cb in list(self._callbacks):
                cb(self._phase, self._reason)
            return self._phase

    def snapshot(self) -> tuple[RunnerPhase, Optional[str]]:
        with self._lock:
            return self._phase, self._reason
