"""Built-in backend reading test sets from JSON files.

The executor is a dry run: every test case is announced through the logging
callback and marked ``not_run``. Backends that actually drive a system under
test register themselves under the ``atf_runner.backends`` entry-point group.
"""

from __future__ import annotations

import html
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from atf_runner.contracts import RunnerBackend

logger = logging.getLogger(__name__)


class TestCase(BaseModel):
    """A single test case as declared in the input file."""

    __test__ = False

    name: str = Field(min_length=1, description="Test case name")
    description: str = Field(default="", description="Free-form description")
    steps: List[str] = Field(default_factory=list, description="Ordered step descriptions")
    status: str = Field(default="pending", description="Outcome recorded by the executor")


class TestSet(BaseModel):
    """Collection of test cases loaded from one input configuration."""

    __test__ = False

    name: str = Field(min_length=1, description="Test set name")
    description: str = Field(default="", description="Free-form description")
    cases: List[TestCase] = Field(default_factory=list, description="Test cases")


class TestReport(BaseModel):
    """Execution record for a test set."""

    __test__ = False

    test_set: Optional[TestSet] = None
    started: str = ""
    finished: str = ""


def collect(path: str) -> Optional[TestSet]:
    """Parse ``path`` into a TestSet; None when unreadable or invalid."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read test set %s: %s", path, exc)
        return None
    try:
        return TestSet.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("Invalid test set %s: %s", path, exc)
        return None


def create_test_report(test_set: TestSet) -> TestReport:
    return TestReport(test_set=test_set)


def execute(test_set: TestSet, log: Callable[..., None]) -> None:
    """Announce each test case without running it."""
    log("info", f"Test set {test_set.name!r}: {len(test_set.cases)} test case(s)")
    for case in test_set.cases:
        log("notice", f"Test case {case.name!r}: not executed (dry run)")
        for index, step in enumerate(case.steps, start=1):
            log("debug", f"  step {index}: {step}")
        case.status = "not_run"


class JsonReportRenderer:
    """Render a TestReport as an HTML fragment, XML and JSON."""

    def to_html(self, report: TestReport) -> str:
        test_set = report.test_set
        if test_set is None:
            return "<p>No test set.</p>\n"
        lines = [
            f"<h1>Test set: {html.escape(test_set.name)}</h1>",
        ]
        if test_set.description:
            lines.append(f'<p class="meta">{html.escape(test_set.description)}</p>')
        lines.append(
            f'<p class="meta">Started: {html.escape(report.started)} '
            f"Finished: {html.escape(report.finished)}</p>"
        )
        lines.append("<table>")
        lines.append("<tr><th>Test case</th><th>Description</th><th>Status</th></tr>")
        for case in test_set.cases:
            status = html.escape(case.status)
            lines.append(
                f"<tr><td>{html.escape(case.name)}</td>"
                f"<td>{html.escape(case.description)}</td>"
                f'<td class="status-{status}">{status}</td></tr>'
            )
        lines.append("</table>")
        return "\n".join(lines) + "\n"

    def to_xml(self, report: TestReport) -> str:
        root = ET.Element(
            "testreport", {"started": report.started, "finished": report.finished}
        )
        test_set = report.test_set
        if test_set is not None:
            ts_el = ET.SubElement(root, "testset", {"name": test_set.name})
            ET.SubElement(ts_el, "description").text = test_set.description
            for case in test_set.cases:
                case_el = ET.SubElement(
                    ts_el, "testcase", {"name": case.name, "status": case.status}
                )
                ET.SubElement(case_el, "description").text = case.description
                for step in case.steps:
                    ET.SubElement(case_el, "step").text = step
        return ET.tostring(root, encoding="unicode")

    def to_json(self, report: TestReport) -> str:
        return report.model_dump_json(indent=2)


BACKEND = RunnerBackend(
    name="json",
    collect=collect,
    create_test_report=create_test_report,
    execute=execute,
    renderer=JsonReportRenderer(),
)
