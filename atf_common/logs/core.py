"""Process-level logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from atf_common.config.env import env_flag, read_env
from atf_common.logs.severity import Severity


def _resolve_level(value: str | int | None, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if value is None:
        return logging.WARNING
    return int(Severity.parse(value))


def _read_logging_env() -> tuple[str | None, bool | None]:
    return (
        read_env("LOG_LEVEL"),
        env_flag("LOG_JSON"),
    )


def make_structlog_formatter(
    json: bool | None = None,
) -> structlog.stdlib.ProcessorFormatter:
    """Build the shared formatter rendering stdlib records through structlog."""
    if json is None:
        json = _read_logging_env()[1]
    renderer: structlog.types.Processor
    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    json: bool | None = None,
    force: bool = False,
) -> None:
    """Configure diagnostics emitted through module loggers.

    The run log itself goes through a LogPipeline owned by the runner; this
    only wires ``logging.getLogger(__name__)`` output to stderr.
    """
    env_level, env_json = _read_logging_env()
    resolved_level = _resolve_level(level or env_level, debug)
    resolved_json = env_json if json is None else json

    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        _configure_structlog()
        return

    if force:
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(make_structlog_formatter(resolved_json))
    root_logger.setLevel(resolved_level)
    root_logger.addHandler(handler)
    _configure_structlog()


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
