"""Write HTML, XML and JSON execution reports into the work directory."""

from __future__ import annotations

import html
import logging
import posixpath
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from atf_common.errors import (
    ATFError,
    RenderError,
    RunnerIOError,
    describe_error,
    error_to_payload,
)
from atf_common.logs.pipeline import LogPipeline
from atf_runner.contracts import ReportRenderer
from atf_runner.paths import to_slash
from atf_runner.reports.assets import DEFAULT_REPORT_CSS, MANDATORY_CSS

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "report"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


@dataclass(frozen=True)
class ReportOptions:
    """What to emit and which stylesheets to link."""

    report_name: str = DEFAULT_REPORT_NAME
    css_file: str = DEFAULT_REPORT_CSS.as_posix()
    mandatory_css: str = MANDATORY_CSS.as_posix()
    emit_xml: bool = False
    emit_json: bool = False


def report_path(workdir: str, report_name: str, extension: str) -> str:
    return to_slash(posixpath.join(to_slash(workdir), f"{report_name}.{extension}"))


def build_html_header(name: str, mandatory_css: str, css_file: str) -> str:
    """Document head linking the built-in and the user stylesheet by base name."""
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>Report: {html.escape(name, quote=False)}</title>",
    ]
    for css in (mandatory_css, css_file):
        href = html.escape(Path(to_slash(css)).name)
        lines.append(f'<link rel="stylesheet" type="text/css" href="{href}">')
    lines.append("</head>")
    return "\n".join(lines) + "\n"


def _test_set_name(report: Any) -> str:
    test_set = getattr(report, "test_set", None)
    return getattr(test_set, "name", "") if test_set is not None else ""


def _write_text(filename: str, text: str) -> None:
    # Encode before opening; a failed encode leaves any previous file intact.
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise RenderError(
            f"Report text for {filename} is not valid UTF-8",
            context={"path": filename, "position": exc.start},
            cause=exc,
        ) from exc
    try:
        with open(filename, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise RunnerIOError(
            f"Cannot write {filename}", context={"path": filename}, cause=exc
        ) from exc


def _copy_asset(source: str, workdir: str) -> None:
    src = Path(source)
    dst = Path(workdir) / src.name
    try:
        if dst.exists() and dst.resolve() == src.resolve():
            return
        shutil.copyfile(src, dst)
    except OSError as exc:
        raise RunnerIOError(
            f"Cannot copy {to_slash(src)} to {to_slash(dst)}",
            context={"source": src, "target": dst},
            cause=exc,
        ) from exc


class ReportEmitter:
    """Render reports through a renderer and write them next to the run log.

    HTML is always produced first. The first failing format is logged at
    Error severity and ends the emission, so a failed HTML report means no
    XML or JSON is attempted.
    """

    def __init__(self, renderer: ReportRenderer, pipeline: LogPipeline) -> None:
        self._renderer = renderer
        self._pipeline = pipeline

    def _render(self, label: str, render: Callable[[Any], str], report: Any) -> str:
        try:
            text = render(report)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"{label} rendering failed", cause=exc) from exc
        if not isinstance(text, str):
            raise RenderError(
                f"{label} renderer returned {type(text).__name__}, expected str",
                context={"format": label},
            )
        return text

    def create_html_report(
        self, report: Any, filename: str, workdir: str, options: ReportOptions
    ) -> None:
        document = build_html_header(
            _test_set_name(report), options.mandatory_css, options.css_file
        )
        body = self._render("HTML", self._renderer.to_html, report)
        document += "<body>" + body + "</body>\n</html>\n"
        _write_text(filename, document)
        # Relative stylesheet links only resolve with the CSS files alongside.
        for css in (options.mandatory_css, options.css_file):
            logger.debug("Copying stylesheet %s into %s", css, workdir)
            _copy_asset(css, workdir)

    def create_xml_report(self, report: Any, filename: str) -> None:
        document = self._render("XML", self._renderer.to_xml, report)
        _write_text(filename, XML_DECLARATION + document)

    def create_json_report(self, report: Any, filename: str) -> None:
        _write_text(filename, self._render("JSON", self._renderer.to_json, report))

    def _report_failure(self, label: str, exc: ATFError) -> None:
        payload = error_to_payload(exc)
        self._pipeline.error(f"{label} report could not be created.")
        self._pipeline.error(f"Reason: {describe_error(exc)}")
        if payload["error_context"]:
            self._pipeline.debug(
                f"{payload['error_type']} context: {payload['error_context']}"
            )

    def emit(self, report: Any, workdir: str, options: ReportOptions) -> list[str]:
        """Produce the requested reports; return the files written.

        Failures are logged and stop further emission; nothing is raised.
        """
        created: list[str] = []
        steps: list[tuple[str, str, Callable[[str], None]]] = [
            (
                "HTML",
                "html",
                lambda name: self.create_html_report(report, name, workdir, options),
            )
        ]
        if options.emit_xml:
            steps.append(("XML", "xml", lambda name: self.create_xml_report(report, name)))
        if options.emit_json:
            steps.append(("JSON", "json", lambda name: self.create_json_report(report, name)))

        for label, extension, create in steps:
            filename = report_path(workdir, options.report_name, extension)
            try:
                create(filename)
            except ATFError as exc:
                self._report_failure(label, exc)
                return created
            self._pipeline.notice(f'{label} report "{filename}" created.')
            created.append(filename)
        return created
