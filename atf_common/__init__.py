"""Shared helpers for atf-runner."""

from atf_common.errors import (
    ATFError,
    CallbackContractError,
    ConfigError,
    InvalidPhaseError,
    RenderError,
    RunnerIOError,
)
from atf_common.logs import LogPipeline, Severity, configure_logging

__all__ = [
    "ATFError",
    "CallbackContractError",
    "ConfigError",
    "InvalidPhaseError",
    "LogPipeline",
    "RenderError",
    "RunnerIOError",
    "Severity",
    "configure_logging",
]
