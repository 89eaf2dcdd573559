"""Logging callback handed to test-set executors."""

from __future__ import annotations

from atf_common.errors import CallbackContractError
from atf_common.logs.pipeline import LogPipeline


class PipelineLogSink:
    """Forward executor log calls to the run's LogPipeline.

    Executors may call ``sink(level, message)`` or ``sink.log(level, message)``.
    A call carrying fewer than two arguments is a programming error and raises
    CallbackContractError, which the runner never catches. Extra positional
    arguments are ignored.
    """

    def __init__(self, pipeline: LogPipeline) -> None:
        self._pipeline = pipeline

    def __call__(self, *params: str) -> None:
        if len(params) < 2:
            raise CallbackContractError(
                "Callback: Wrong number of parameters.",
                context={"received": len(params), "expected": 2},
            )
        self.log(params[0], params[1])

    def log(self, level: str, message: str) -> None:
        self._pipeline.log_s(level, message)
