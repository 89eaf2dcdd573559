"""Tests for the severity-filtered log pipeline."""

from __future__ import annotations

import io
import itertools
import logging
from pathlib import Path

import pytest

from atf_common.errors import RunnerIOError
from atf_common.logs.handlers import (
    DEFAULT_SYSLOG_PORT,
    HandlerKind,
    SeveritySysLogHandler,
    parse_syslog_target,
)
from atf_common.logs.pipeline import LogPipeline, configure_pipeline, resolve_log_file
from atf_common.logs.severity import Severity
from tests.helpers.fakes import memory_handler


pytestmark = pytest.mark.unit_common


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ATF_LOG_JSON", raising=False)


@pytest.mark.parametrize(
    "severity, minimum", list(itertools.product(list(Severity), repeat=2))
)
def test_handler_receives_call_iff_severity_reaches_minimum(severity, minimum) -> None:
    pipeline = LogPipeline()
    entry, handler = memory_handler(minimum)
    pipeline.add_handler(entry)
    pipeline.start()

    pipeline.log(severity, "probe")
    pipeline.close()

    assert (handler.messages == ["probe"]) is (severity >= minimum)
    assert entry.accepts(severity) is (severity >= minimum)


def test_handlers_are_dispatched_in_insertion_order() -> None:
    seen: list[tuple[str, str]] = []
    pipeline = LogPipeline()
    for tag in ("first", "second", "third"):
        entry, _ = memory_handler(Severity.DEBUG, sink=seen, tag=tag)
        pipeline.add_handler(entry)
    pipeline.start()

    pipeline.notice("one")
    pipeline.error("two")
    pipeline.close()

    assert seen == [
        ("first", "one"),
        ("second", "one"),
        ("third", "one"),
        ("first", "two"),
        ("second", "two"),
        ("third", "two"),
    ]


def test_convenience_methods_map_to_severities(memory_pipeline) -> None:
    pipeline, handler = memory_pipeline
    pipeline.debug("d")
    pipeline.info("i")
    pipeline.notice("n")
    pipeline.warning("w")
    pipeline.error("e")
    pipeline.critical("c")
    pipeline.log_s("warn", "textual\n")

    levels = [record.levelno for record in handler.records]
    assert levels == [10, 20, 25, 30, 40, 50, 30]
    assert handler.messages[-1] == "textual"


def test_pipeline_rejects_calls_before_start_and_after_close() -> None:
    pipeline = LogPipeline()
    with pytest.raises(RuntimeError):
        pipeline.info("too early")
    pipeline.start()
    pipeline.close()
    with pytest.raises(RuntimeError):
        pipeline.info("too late")
    pipeline.close()


def test_handlers_cannot_be_added_after_start() -> None:
    pipeline = LogPipeline()
    pipeline.start()
    entry, _ = memory_handler(Severity.DEBUG)
    with pytest.raises(RuntimeError):
        pipeline.add_handler(entry)
    pipeline.close()


def test_failed_handler_write_does_not_reach_the_caller(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging, "raiseExceptions", False)
    stream = io.StringIO()
    pipeline = configure_pipeline("broken.log", None, False, tmp_path, stream=stream)
    pipeline.start()
    file_entry = pipeline.handlers[0]
    file_entry.handler.stream.close()

    pipeline.notice("still delivered")
    pipeline.close()

    assert "still delivered" in stream.getvalue()


@pytest.mark.parametrize(
    "log_file, expected",
    [
        (None, "/work/dir/output.log"),
        ("", "/work/dir/output.log"),
        ("run.log", "/work/dir/run.log"),
        ("logs/run.log", "/work/dir/logs/run.log"),
        ("/var/log/atf.log", "/var/log/atf.log"),
    ],
)
def test_resolve_log_file(log_file, expected) -> None:
    assert resolve_log_file(log_file, "/work/dir") == expected


def test_configure_pipeline_default_levels(tmp_path: Path) -> None:
    pipeline = configure_pipeline(None, "", False, tmp_path, stream=io.StringIO())

    kinds = [(entry.kind, entry.minimum) for entry in pipeline.handlers]
    assert kinds == [
        (HandlerKind.FILE, Severity.INFORMATIONAL),
        (HandlerKind.STREAM, Severity.NOTICE),
    ]
    assert pipeline.handlers[0].destination == (tmp_path / "output.log").as_posix()
    pipeline.close()


def test_configure_pipeline_debug_lowers_levels_and_adds_syslog(tmp_path: Path) -> None:
    pipeline = configure_pipeline(
        "debug.log", "127.0.0.1:5514", True, tmp_path, stream=io.StringIO()
    )

    kinds = [(entry.kind, entry.minimum) for entry in pipeline.handlers]
    assert kinds == [
        (HandlerKind.FILE, Severity.DEBUG),
        (HandlerKind.STREAM, Severity.DEBUG),
        (HandlerKind.SYSLOG, Severity.DEBUG),
    ]
    assert pipeline.handlers[2].destination == "127.0.0.1:5514"
    assert "syslog handler -> 127.0.0.1:5514" in pipeline.describe()
    pipeline.close()


def test_configure_pipeline_fails_when_log_file_cannot_be_created(tmp_path: Path) -> None:
    target = tmp_path / "missing" / "run.log"
    with pytest.raises(RunnerIOError):
        configure_pipeline(str(target), None, False, tmp_path, stream=io.StringIO())


def test_syslog_failure_is_not_fatal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(*args, **kwargs):
        raise OSError("no route to host")

    monkeypatch.setattr(
        "atf_common.logs.pipeline.build_syslog_handler", refuse
    )
    pipeline = configure_pipeline(None, "logs.example:514", False, tmp_path, stream=io.StringIO())

    assert [entry.kind for entry in pipeline.handlers] == [HandlerKind.FILE, HandlerKind.STREAM]
    pipeline.close()


def test_file_and_stream_filter_independently(tmp_path: Path) -> None:
    stream = io.StringIO()
    pipeline = configure_pipeline(None, None, False, tmp_path, stream=stream)
    pipeline.start()

    pipeline.debug("debug line")
    pipeline.info("info line")
    pipeline.notice("notice line")
    pipeline.close()

    file_text = (tmp_path / "output.log").read_text(encoding="utf-8")
    assert "debug line" not in file_text
    assert "INFO info line" in file_text
    assert "NOTICE notice line" in file_text
    console = stream.getvalue()
    assert "info line" not in console
    assert "notice line" in console


@pytest.mark.parametrize(
    "target, expected",
    [
        ("10.0.0.5", ("10.0.0.5", DEFAULT_SYSLOG_PORT)),
        ("10.0.0.5:1514", ("10.0.0.5", 1514)),
        ("logs.example:bad", ("logs.example:bad", DEFAULT_SYSLOG_PORT)),
        ("[::1]:1514", ("::1", 1514)),
        ("::1", ("::1", DEFAULT_SYSLOG_PORT)),
        ("/dev/log", "/dev/log"),
    ],
)
def test_parse_syslog_target(target, expected) -> None:
    assert parse_syslog_target(target) == expected


def test_syslog_priorities_cover_extra_levels() -> None:
    handler = SeveritySysLogHandler(address=("127.0.0.1", 5514))
    try:
        assert handler.mapPriority("NOTICE") == "notice"
        assert handler.mapPriority("EMERGENCY") == "emerg"
        assert handler.mapPriority("WARNING") == "warning"
    finally:
        handler.close()
