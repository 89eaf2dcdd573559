"""Run log pipeline and process logging configuration."""

from atf_common.logs.core import configure_logging, make_structlog_formatter
from atf_common.logs.handlers import (
    LOG_FORMAT,
    HandlerKind,
    PipelineHandler,
    build_file_handler,
    build_stream_handler,
    build_syslog_handler,
    parse_syslog_target,
)
from atf_common.logs.pipeline import (
    DEFAULT_LOG_FILE,
    LogPipeline,
    configure_pipeline,
    resolve_log_file,
)
from atf_common.logs.severity import Severity

__all__ = [
    "DEFAULT_LOG_FILE",
    "LOG_FORMAT",
    "HandlerKind",
    "LogPipeline",
    "PipelineHandler",
    "Severity",
    "build_file_handler",
    "build_stream_handler",
    "build_syslog_handler",
    "configure_logging",
    "configure_pipeline",
    "make_structlog_formatter",
    "parse_syslog_target",
    "resolve_log_file",
]
