"""Report emission (HTML, XML, JSON) and bundled stylesheets."""

from atf_runner.reports.assets import DEFAULT_REPORT_CSS, MANDATORY_CSS
from atf_runner.reports.emitter import (
    DEFAULT_REPORT_NAME,
    XML_DECLARATION,
    ReportEmitter,
    ReportOptions,
    build_html_header,
    report_path,
)

__all__ = [
    "DEFAULT_REPORT_CSS",
    "DEFAULT_REPORT_NAME",
    "MANDATORY_CSS",
    "XML_DECLARATION",
    "ReportEmitter",
    "ReportOptions",
    "build_html_header",
    "report_path",
]
