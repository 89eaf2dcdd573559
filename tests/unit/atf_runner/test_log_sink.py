"""Tests for the executor logging callback."""

from __future__ import annotations

import pytest

from atf_common.errors import CallbackContractError
from atf_runner.callback import PipelineLogSink
from atf_runner.contracts import LogSink


pytestmark = pytest.mark.unit_runner


def test_sink_forwards_level_and_message(memory_pipeline) -> None:
    pipeline, handler = memory_pipeline
    sink = PipelineLogSink(pipeline)

    sink("notice", "step passed")
    sink.log("err", "step failed")

    assert handler.messages == ["step passed", "step failed"]
    assert [record.levelno for record in handler.records] == [25, 40]
    assert isinstance(sink, LogSink)


def test_unknown_level_falls_back_to_informational(memory_pipeline) -> None:
    pipeline, handler = memory_pipeline

    PipelineLogSink(pipeline)("chatty", "hello")

    assert handler.records[0].levelno == 20


@pytest.mark.parametrize("params", [(), ("info",)])
def test_too_few_arguments_break_the_contract(memory_pipeline, params) -> None:
    pipeline, handler = memory_pipeline

    with pytest.raises(CallbackContractError, match="Wrong number of parameters"):
        PipelineLogSink(pipeline)(*params)

    assert handler.records == []


def test_extra_arguments_are_ignored(memory_pipeline) -> None:
    pipeline, handler = memory_pipeline

    PipelineLogSink(pipeline)("warning", "kept", "dropped", "also dropped")

    assert handler.messages == ["kept"]
