"""Error types raised by atf-runner."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(item) for item in value]
    if isinstance(value, os.PathLike):
        return Path(value).as_posix()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class ATFError(Exception):
    """Base class; ``context`` holds JSON-safe details about the failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = _plain(context or {})
        if cause is not None:
            self.__cause__ = cause


class ConfigError(ATFError):
    """Missing or invalid input configuration, or an empty test set."""


class InvalidPhaseError(ConfigError):
    """Runner operation invoked outside of its lifecycle phase."""


class RunnerIOError(ATFError):
    """Filesystem failure (work directory, log file, report files, CSS copies)."""


class RenderError(ATFError):
    """A renderer failed or produced text that cannot be written."""


class CallbackContractError(ATFError):
    """Logging callback invoked with the wrong number of arguments."""


def error_to_payload(error: BaseException) -> dict[str, Any]:
    """Flatten an error into the fields written to the run log."""
    payload: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error": str(error),
        "error_context": getattr(error, "context", {}),
    }
    cause = error.__cause__
    if cause is not None and str(cause) != str(error):
        payload["cause"] = str(cause)
    return payload


def describe_error(error: BaseException) -> str:
    """``"message: cause"``, or just the message when there is no distinct cause."""
    payload = error_to_payload(error)
    if "cause" in payload:
        return f"{payload['error']}: {payload['cause']}"
    return payload["error"]
