"""Runner: initialize a run, execute the test set, emit the reports."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, TextIO

from atf_common.errors import ConfigError
from atf_common.logs.pipeline import LogPipeline, configure_pipeline, resolve_log_file
from atf_runner.callback import PipelineLogSink
from atf_runner.contracts import RunnerBackend
from atf_runner.models.config import RunnerConfig
from atf_runner.paths import ensure_workdir, resolve_workdir
from atf_runner.reports.assets import MANDATORY_CSS
from atf_runner.reports.emitter import ReportEmitter, ReportOptions
from atf_runner.state import RunnerPhase, RunnerStateMachine

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Runner:
    """Orchestrates one test-automation run.

    Phases run strictly in order: ``initialize()`` -> ``run()`` ->
    ``create_reports()``; each call fails fast with InvalidPhaseError when
    invoked out of order. The runner owns its LogPipeline and hands it
    explicitly to everything that logs.
    """

    def __init__(
        self,
        config: RunnerConfig,
        backend: RunnerBackend,
        *,
        stream: Optional[TextIO] = None,
        clock: Callable[[], datetime] = datetime.now,
        mandatory_css: str = MANDATORY_CSS.as_posix(),
    ) -> None:
        self.config = config
        self.backend = backend
        self.report: Any = None
        self.pipeline: Optional[LogPipeline] = None
        self.workdir: str = ""
        self.log_file: str = ""
        self.state = RunnerStateMachine()
        self.state.register_callback(self._on_phase)
        self._stream = stream
        self._clock = clock
        self._mandatory_css = mandatory_css

    @property
    def phase(self) -> RunnerPhase:
        return self.state.phase

    def _on_phase(self, phase: RunnerPhase, reason: Optional[str]) -> None:
        if reason:
            logger.info("Runner phase -> %s (%s)", phase.value, reason)
        else:
            logger.debug("Runner phase -> %s", phase.value)

    def _now(self) -> str:
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def _fail(self, exc: BaseException) -> None:
        self.state.transition(RunnerPhase.FAILED, reason=str(exc))

    # ------------------------------------------------------------------ init

    def initialize(self) -> None:
        """Collect the test set, prepare the work directory and the run log.

        Raises:
            ConfigError: no input path, the input cannot be read, or the
                collector produced nothing.
            RunnerIOError: the work directory or the log file cannot be created.
        """
        self.state.require(RunnerPhase.UNINITIALIZED, "initialize")
        try:
            self._collect()
            test_set = self.report.test_set
            self.workdir = resolve_workdir(
                self.config.workdir, test_set.name, now=self._clock()
            )
            ensure_workdir(self.workdir)
            self._create_log()
        except Exception as exc:
            self._fail(exc)
            raise
        self.state.transition(RunnerPhase.INITIALIZED)
        self.pipeline.warning("Log successfully created")

    def _collect(self) -> None:
        if not self.config.input_path:
            raise ConfigError("no input configuration")
        try:
            test_set = self.backend.collect(self.config.input_path)
        except (OSError, ValueError) as exc:
            raise ConfigError(
                f"Cannot read input configuration {self.config.input_path}",
                context={"input": self.config.input_path},
                cause=exc,
            ) from exc
        if test_set is None:
            raise ConfigError(
                "Test set is empty.", context={"input": self.config.input_path}
            )
        self.report = self.backend.create_test_report(test_set)

    def _create_log(self) -> None:
        self.log_file = resolve_log_file(self.config.log_file, self.workdir)
        pipeline = configure_pipeline(
            self.log_file,
            self.config.syslog,
            self.config.debug,
            self.workdir,
            stream=self._stream,
        )
        pipeline.start()
        self.pipeline = pipeline

    # ------------------------------------------------------------------- run

    def run(self) -> None:
        """Execute the test set through the backend executor."""
        self.state.require(RunnerPhase.INITIALIZED, "run")
        try:
            self._execute()
        except Exception as exc:
            self._fail(exc)
            raise
        self.state.transition(RunnerPhase.EXECUTED)

    def _execute(self) -> None:
        pipeline = self.pipeline
        sink = PipelineLogSink(pipeline)
        test_set = self.report.test_set
        name = test_set.name if test_set is not None else ""

        self.report.started = self._now()
        pipeline.notice(f"Started: {self.report.started}")
        if test_set is not None:
            pipeline.notice(f'# Starting Test set: "{name}"')
            self.backend.execute(test_set, sink)

        self.report.finished = self._now()
        pipeline.notice(f'# Test set: "{name}" end.')
        pipeline.notice(f"Finished: {self.report.finished}")

    # --------------------------------------------------------------- reports

    def report_options(self) -> ReportOptions:
        return ReportOptions(
            report_name=self.config.report_name,
            css_file=self.config.css_file,
            mandatory_css=self._mandatory_css,
            emit_xml=self.config.emit_xml,
            emit_json=self.config.emit_json,
        )

    def create_reports(self) -> list[str]:
        """Write the HTML report and the requested XML/JSON reports.

        Report failures are logged, not raised; the run still counts as
        reported. Returns the files actually written.
        """
        self.state.require(RunnerPhase.EXECUTED, "create_reports")
        options = self.report_options()
        emitter = ReportEmitter(self.backend.renderer, self.pipeline)
        created = emitter.emit(self.report, self.workdir, options)
        expected = 1 + int(options.emit_xml) + int(options.emit_json)
        reason = None if len(created) == expected else "report generation incomplete"
        self.state.transition(RunnerPhase.REPORTED, reason=reason)
        return created

    # ---------------------------------------------------------------- misc

    def close(self) -> None:
        if self.pipeline is not None:
            self.pipeline.close()

    def _describe_phase(self) -> str:
        phase, reason = self.state.snapshot()
        if reason:
            return f"Phase: {phase.value} ({reason})"
        return f"Phase: {phase.value}"

    def describe(self, complete: bool = False) -> str:
        """Readable summary of the runner configuration and test set."""
        cfg = self.config
        lines = [
            f"Input config file: {cfg.input_path!r}",
            f"Working dir: {self.workdir or cfg.workdir!r}",
            f"Log filename: {self.log_file or cfg.log_file!r}",
            f"Syslog target: {cfg.syslog!r}",
            f"Report name: {cfg.report_name!r}",
            f"CSS file for HTML report: {cfg.css_file!r}",
            f"Debug mode enabled? {cfg.debug}",
            f"Parallel execution? {cfg.parallel}",
            self._describe_phase(),
            "Loggers:",
        ]
        if self.pipeline is not None:
            lines.extend(f"  {line}" for line in self.pipeline.describe().splitlines())
        test_set = getattr(self.report, "test_set", None)
        if test_set is None:
            lines.append("TestSet not defined yet.")
        elif complete and hasattr(test_set, "model_dump_json"):
            lines.append(test_set.model_dump_json(indent=2))
        else:
            lines.append(f"TestSet: {test_set.name!r}")
        return "\n".join(lines)
