"""
Command-line interface for atf-runner.

Loads a test set, runs it through the selected backend and writes the
HTML/XML/JSON reports into the working directory.
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from atf_common.errors import ATFError, ConfigError, describe_error
from atf_common.logs.core import configure_logging
from atf_runner.backends import backend_origins, get_backend
from atf_runner.models.config import DEFAULT_BACKEND, RunnerConfig
from atf_runner.reports.assets import DEFAULT_REPORT_CSS
from atf_runner.runner import Runner

app = typer.Typer(
    help="Run a test set and create execution reports.",
    add_completion=False,
)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def _abort(message: str, *hints: str) -> None:
    err_console.print(message, style="bold red", markup=False)
    for hint in hints:
        err_console.print(hint, markup=False)
    err_console.print("Exiting...", markup=False)
    raise typer.Exit(1)


def _list_backends(value: bool) -> None:
    if value:
        table = Table(title="Backends", show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Source")
        for name, origin in backend_origins().items():
            table.add_row(name, origin)
        Console().print(table)
        raise typer.Exit()


@app.command()
def run_command(
    input_path: str = typer.Option(
        "", "--input", "-i", envvar="ATF_INPUT", help="Input configuration path."
    ),
    workdir: str = typer.Option(
        "", "--workdir", "-w", envvar="ATF_WORKDIR", help="Working directory path."
    ),
    logfile: str = typer.Option(
        "", "--logfile", "-l", envvar="ATF_LOGFILE", help="Log file name."
    ),
    syslog: str = typer.Option(
        "", "--syslog", "-s", envvar="ATF_SYSLOG", help="Syslog server as host[:port]."
    ),
    report: str = typer.Option(
        "report",
        "--report",
        "-r",
        envvar="ATF_REPORT",
        help="Base name of the report files.",
    ),
    css: str = typer.Option(
        DEFAULT_REPORT_CSS.as_posix(),
        "--css",
        "-c",
        envvar="ATF_CSS",
        help="Custom CSS file for the HTML report.",
    ),
    xml: bool = typer.Option(
        False,
        "--xml",
        "-X",
        envvar="ATF_XML",
        help="Create XML report (beside HTML report).",
    ),
    json: bool = typer.Option(
        False,
        "--json",
        "-J",
        envvar="ATF_JSON",
        help="Create JSON report (beside HTML report).",
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d", envvar="ATF_DEBUG", help="Enable debug logging."
    ),
    parallel: bool = typer.Option(
        False,
        "--parallel",
        envvar="ATF_PARALLEL",
        help="Reserved; test cases always run sequentially.",
    ),
    backend: str = typer.Option(
        DEFAULT_BACKEND, "--backend", "-b", envvar="ATF_BACKEND", help="Test-set backend."
    ),
    list_backends: Optional[bool] = typer.Option(
        None,
        "--list-backends",
        callback=_list_backends,
        is_eager=True,
        help="List available backends and exit.",
    ),
) -> None:
    """Initialize, run and report a single test set."""
    configure_logging(debug=debug)
    try:
        config = RunnerConfig(
            input_path=input_path,
            workdir=workdir,
            log_file=logfile,
            syslog=syslog,
            report_name=report,
            css_file=css,
            emit_xml=xml,
            emit_json=json,
            parallel=parallel,
            debug=debug,
            backend=backend,
        )
    except ValidationError as exc:
        _abort(f"Invalid arguments: {exc}")

    try:
        runner = Runner(config, get_backend(config.backend))
        runner.initialize()
    except ConfigError as exc:
        _abort(
            describe_error(exc),
            "Please define the input configuration file",
            "Use '--help' to display help",
        )
    except ATFError as exc:
        _abort(describe_error(exc))

    if config.debug:
        runner.pipeline.debug(runner.describe(complete=True))
    try:
        runner.run()
        runner.create_reports()
    finally:
        runner.close()
    if runner.state.reason:
        err_console.print(
            f"Run {runner.phase.value} with {runner.state.reason}, see {runner.log_file}",
            style="yellow",
            markup=False,
        )


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
