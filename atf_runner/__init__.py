"""atf-runner: test-automation run orchestrator.

Loads a test set through a backend, runs it with a severity-filtered
multi-destination run log and writes HTML/XML/JSON reports.
"""

from atf_runner.contracts import RunnerBackend
from atf_runner.models.config import RunnerConfig
from atf_runner.runner import Runner
from atf_runner.state import RunnerPhase, RunnerStateMachine

__all__ = [
    "Runner",
    "RunnerBackend",
    "RunnerConfig",
    "RunnerPhase",
    "RunnerStateMachine",
]
