"""Severity-filtered, multi-handler run log."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, TextIO

from atf_common.logs.handlers import (
    LOG_FORMAT,
    PipelineHandler,
    build_file_handler,
    build_stream_handler,
    build_syslog_handler,
)
from atf_common.logs.severity import Severity

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "output.log"

# All text goes to the file, the console only gets the important lines and
# syslog skips the execution chatter.
DEFAULT_FILE_LEVEL = Severity.INFORMATIONAL
DEFAULT_STREAM_LEVEL = Severity.NOTICE
DEFAULT_SYSLOG_LEVEL = Severity.NOTICE


class LogPipeline:
    """Fan a single log call out to an ordered set of handlers.

    The pipeline owns a private ``logging.Logger`` that is not registered in
    the logging manager and does not propagate, so nothing outside the owner
    can reach it. Handlers are dispatched in insertion order and each one
    drops records below its own minimum severity.
    """

    def __init__(self, name: str = "atf.run") -> None:
        self._logger = logging.Logger(name, level=logging.DEBUG)
        self._logger.propagate = False
        self._handlers: list[PipelineHandler] = []
        self._started = False
        self._closed = False

    @property
    def handlers(self) -> tuple[PipelineHandler, ...]:
        return tuple(self._handlers)

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    def add_handler(self, handler: PipelineHandler) -> None:
        if self._started:
            raise RuntimeError("Handlers cannot be added once the pipeline is started")
        self._handlers.append(handler)

    def start(self) -> None:
        """Attach the configured handlers; calls are accepted afterwards."""
        if self._started:
            return
        for entry in self._handlers:
            self._logger.addHandler(entry.handler)
        self._started = True

    def close(self) -> None:
        """Flush and close every handler."""
        if self._closed:
            return
        for entry in self._handlers:
            try:
                entry.handler.flush()
                entry.handler.close()
            except (OSError, ValueError) as exc:
                logger.warning("Failed to close %s: %s", entry.describe(), exc)
            self._logger.removeHandler(entry.handler)
        self._closed = True

    def log(self, severity: Severity | str | int, message: str) -> None:
        if not self._started or self._closed:
            raise RuntimeError("Log pipeline is not accepting calls")
        level = Severity.parse(severity)
        self._logger.log(int(level), message.rstrip("\n"))

    def log_s(self, level_name: str, message: str) -> None:
        """Log with a textual level such as ``"warn"`` or ``"notice"``."""
        self.log(Severity.parse(level_name), message)

    def debug(self, message: str) -> None:
        self.log(Severity.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(Severity.INFORMATIONAL, message)

    def notice(self, message: str) -> None:
        self.log(Severity.NOTICE, message)

    def warning(self, message: str) -> None:
        self.log(Severity.WARNING, message)

    def error(self, message: str) -> None:
        self.log(Severity.ERROR, message)

    def critical(self, message: str) -> None:
        self.log(Severity.CRITICAL, message)

    def describe(self) -> str:
        if not self._handlers:
            return "no handlers"
        return "\n".join(entry.describe() for entry in self._handlers)


def resolve_log_file(log_file: str | None, workdir: Path | str) -> str:
    """Absolute log file path; relative names live under the work directory."""
    if not log_file:
        return (Path(workdir) / DEFAULT_LOG_FILE).as_posix()
    candidate = Path(log_file)
    if candidate.is_absolute():
        return candidate.as_posix()
    return (Path(workdir) / candidate).as_posix()


def _optional_handler(
    label: str, build: Callable[[], PipelineHandler]
) -> PipelineHandler | None:
    try:
        return build()
    except (OSError, ValueError) as exc:
        logger.warning("Skipping %s handler: %s", label, exc)
        return None


def configure_pipeline(
    log_file: str | None,
    syslog_target: str | None,
    debug: bool,
    workdir: Path | str,
    *,
    stream: TextIO | None = None,
    fmt: str = LOG_FORMAT,
) -> LogPipeline:
    """Build a pipeline with file, console and (optional) syslog handlers.

    Raises:
        RunnerIOError: if the log file cannot be opened. Console and syslog
            failures only drop the affected handler.
    """
    file_level = DEFAULT_FILE_LEVEL
    stream_level = DEFAULT_STREAM_LEVEL
    syslog_level = DEFAULT_SYSLOG_LEVEL
    if debug:
        file_level = stream_level = syslog_level = Severity.DEBUG

    pipeline = LogPipeline()
    pipeline.add_handler(
        build_file_handler(resolve_log_file(log_file, workdir), file_level, fmt)
    )

    console = _optional_handler(
        "console", lambda: build_stream_handler(stream_level, stream)
    )
    if console is not None:
        pipeline.add_handler(console)

    if syslog_target:
        remote = _optional_handler(
            "syslog", lambda: build_syslog_handler(syslog_target, syslog_level, fmt)
        )
        if remote is not None:
            pipeline.add_handler(remote)
    return pipeline
