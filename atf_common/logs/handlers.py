"""Handler factories for the run log pipeline."""

from __future__ import annotations

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO

from atf_common.errors import RunnerIOError
from atf_common.logs.core import make_structlog_formatter
from atf_common.logs.severity import Severity


LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DEFAULT_SYSLOG_PORT = logging.handlers.SYSLOG_UDP_PORT


class HandlerKind(str, Enum):
    """Destination kinds a pipeline can fan out to."""

    FILE = "file"
    STREAM = "stream"
    SYSLOG = "syslog"


@dataclass(frozen=True)
class PipelineHandler:
    """A stdlib handler plus the metadata the pipeline reports about it."""

    kind: HandlerKind
    minimum: Severity
    destination: str
    handler: logging.Handler

    def accepts(self, severity: Severity) -> bool:
        return severity >= self.minimum

    def describe(self) -> str:
        return f"{self.kind.value} handler -> {self.destination} (min={self.minimum.label})"


class SeveritySysLogHandler(logging.handlers.SysLogHandler):
    """SysLogHandler that knows the NOTICE/ALERT/EMERGENCY level names."""

    _EXTRA_PRIORITIES = {
        Severity.NOTICE.label: "notice",
        Severity.ALERT.label: "alert",
        Severity.EMERGENCY.label: "emerg",
    }

    def mapPriority(self, levelName: str) -> str:
        extra = self._EXTRA_PRIORITIES.get(levelName)
        if extra is not None:
            return extra
        return super().mapPriority(levelName)


def _parse_port(raw: str) -> int | None:
    if not raw.isdigit():
        return None
    port = int(raw)
    return port if 0 < port < 65536 else None


def parse_syslog_target(target: str) -> str | tuple[str, int]:
    """Turn ``host[:port]`` or a unix socket path into a SysLogHandler address."""
    target = target.strip()
    if target.startswith("/"):
        return target
    if target.count(":") > 1 and not target.startswith("["):
        return (target, DEFAULT_SYSLOG_PORT)
    host, sep, raw_port = target.rpartition(":")
    if not sep or not host:
        return (target, DEFAULT_SYSLOG_PORT)
    port = _parse_port(raw_port)
    if port is None:
        return (target, DEFAULT_SYSLOG_PORT)
    return (host.strip("[]"), port)


def build_file_handler(
    path: Path | str, minimum: Severity, fmt: str = LOG_FORMAT
) -> PipelineHandler:
    """Open the run log file; failure is fatal for the pipeline."""
    log_path = Path(path)
    try:
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as exc:
        raise RunnerIOError(
            f"Log file {log_path.as_posix()} could not be created",
            context={"path": log_path},
            cause=exc,
        ) from exc
    handler.setLevel(int(minimum))
    handler.setFormatter(logging.Formatter(fmt))
    return PipelineHandler(HandlerKind.FILE, minimum, log_path.as_posix(), handler)


def build_stream_handler(
    minimum: Severity,
    stream: TextIO | None = None,
    json: bool | None = None,
) -> PipelineHandler:
    """Console handler rendered through the shared structlog formatter."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(int(minimum))
    handler.setFormatter(make_structlog_formatter(json))
    name = getattr(handler.stream, "name", "<stream>")
    return PipelineHandler(HandlerKind.STREAM, minimum, str(name), handler)


def build_syslog_handler(
    target: str, minimum: Severity, fmt: str = LOG_FORMAT
) -> PipelineHandler:
    """Syslog handler for ``host[:port]`` targets or a local socket path."""
    address = parse_syslog_target(target)
    handler = SeveritySysLogHandler(address=address)
    handler.setLevel(int(minimum))
    handler.setFormatter(logging.Formatter(fmt))
    if isinstance(address, tuple):
        destination = f"{address[0]}:{address[1]}"
    else:
        destination = address
    return PipelineHandler(HandlerKind.SYSLOG, minimum, destination, handler)
