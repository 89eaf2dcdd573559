"""Runner configuration populated by the command line."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from atf_runner.reports.assets import DEFAULT_REPORT_CSS
from atf_runner.reports.emitter import DEFAULT_REPORT_NAME

DEFAULT_BACKEND = "json"


class RunnerConfig(BaseModel):
    """Settings for a single run."""

    input_path: str = Field(default="", description="Input test-set configuration path")
    workdir: str = Field(
        default="",
        description="Working directory; defaults to <home>/atfrunner/<testset>_<timestamp>",
    )
    log_file: str = Field(
        default="", description="Log file name, relative to the working directory unless absolute"
    )
    syslog: str = Field(default="", description="Syslog target as host[:port] or socket path")
    report_name: str = Field(
        default=DEFAULT_REPORT_NAME, description="Base name of the report files"
    )
    css_file: str = Field(
        default=DEFAULT_REPORT_CSS.as_posix(),
        description="User stylesheet linked from the HTML report",
    )
    emit_xml: bool = Field(default=False, description="Create XML report beside the HTML one")
    emit_json: bool = Field(default=False, description="Create JSON report beside the HTML one")
    parallel: bool = Field(
        default=False, description="Reserved; execution is always sequential"
    )
    debug: bool = Field(default=False, description="Lower file and console log levels to DEBUG")
    backend: str = Field(default=DEFAULT_BACKEND, description="Test-set backend name")

    @field_validator("input_path", "workdir", "log_file", "syslog", "css_file", "backend")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("report_name")
    @classmethod
    def _bare_report_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            return DEFAULT_REPORT_NAME
        if "/" in value or "\\" in value:
            raise ValueError("report_name must be a file name without directories")
        return value
