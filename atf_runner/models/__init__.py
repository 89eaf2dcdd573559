"""Runner data models."""

from atf_runner.models.config import RunnerConfig

__all__ = ["RunnerConfig"]
