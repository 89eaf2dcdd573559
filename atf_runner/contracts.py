"""Contracts for the collaborators the runner drives but does not implement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class TestSet(Protocol):
    """A collected test set; the runner only needs its name."""

    name: str


class TestReport(Protocol):
    """Execution record wrapping a test set."""

    test_set: Optional[TestSet]
    started: str
    finished: str


@runtime_checkable
class LogSink(Protocol):
    """Narrow logging capability handed to executors."""

    def log(self, level: str, message: str) -> None: ...


class ReportRenderer(Protocol):
    """Produces report bodies; each method may raise RenderError."""

    def to_html(self, report: Any) -> str: ...

    def to_xml(self, report: Any) -> str: ...

    def to_json(self, report: Any) -> str: ...


Collector = Callable[[str], Optional[TestSet]]
ReportFactory = Callable[[TestSet], TestReport]
Executor = Callable[[TestSet, Callable[..., None]], None]


@dataclass(frozen=True)
class RunnerBackend:
    """Bundle of collector, report factory, executor and renderer."""

    name: str
    collect: Collector
    create_test_report: ReportFactory
    execute: Executor
    renderer: ReportRenderer
