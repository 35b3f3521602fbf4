#!/usr/bin/env python3
"""
Scribe CLI - Markdown Reports for Test Runs

Usage:
    scribe render <events.yaml> [OPTIONS]
    scribe validate <events.yaml>
    scribe --version
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .events import EventLog, load_event_log
from .reporting import (
    DuplicatePolicy,
    MarkdownReporter,
    ReporterOptions,
    RunStatus,
    TestStatus,
    load_options,
)

app = typer.Typer(
    name="scribe",
    help="📝 Scribe - Markdown Reports for Test Runs",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"📝 Scribe v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    📝 Scribe - Markdown Reports for Test Runs

    Replay recorded test runs into diffable Markdown reports.
    """
    pass


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def load_log_or_exit(event_log: Path) -> EventLog:
    log, validation = load_event_log(event_log)
    if log is None:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)
    return log


def build_options(
    config: Optional[Path],
    output_dir: Optional[Path],
    filename: Optional[str],
    title: Optional[str],
    keep_latest: bool,
) -> ReporterOptions:
    """Merge the config file (if any) with command-line overrides."""
    if config is not None:
        options, validation = load_options(config)
        if options is None:
            console.print(f"\n[red]❌ Invalid config:[/red] {config}")
            console.print(str(validation))
            raise typer.Exit(code=1)
    else:
        options = ReporterOptions()

    if output_dir is not None:
        options.output_dir = output_dir
    if filename is not None:
        options.filename = filename
    if title is not None:
        options.title = title
    if keep_latest:
        options.duplicate_policy = DuplicatePolicy.KEEP_LATEST
    return options


@app.command()
def render(
    event_log: Path = typer.Argument(
        ...,
        help="Path to the recorded event log (YAML or JSON)",
        exists=True,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Reporter config YAML file"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o",
        help="Directory for the report and its screenshots"
    ),
    filename: Optional[str] = typer.Option(
        None, "--filename", "-f",
        help="Report file name inside the output directory"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t",
        help="Report heading"
    ),
    keep_latest: bool = typer.Option(
        False, "--keep-latest",
        help="Report only the last result of retried tests"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V",
        help="Show debug logging"
    ),
):
    """
    Render a Markdown report from a recorded event log.

    Every existing file in the output directory is removed first.
    """
    configure_logging(verbose)

    if not quiet:
        console.print(f"\n📄 Loading event log: {event_log}")

    log = load_log_or_exit(event_log)
    options = build_options(config, output_dir, filename, title, keep_latest)
    reporter = MarkdownReporter(options)

    try:
        report_path = reporter.replay(log)
    except OSError as e:
        console.print(f"\n[red]❌ Failed to write report:[/red] {e}")
        raise typer.Exit(code=1)

    if not quiet:
        outcomes = reporter.accumulator.snapshot()
        table = Table(title="Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Value")
        table.add_row("Total Tests", str(len(outcomes)))
        for status in (TestStatus.PASSED, TestStatus.FAILED, TestStatus.SKIPPED):
            count = sum(1 for o in outcomes if o.status == status)
            table.add_row(status.value.capitalize(), str(count))
        table.add_row("Status", reporter.accumulator.meta.status.value.upper())

        console.print()
        console.print(table)
        console.print(f"\n📁 Report saved: {report_path}")

    if RunStatus.parse(log.run.status) == RunStatus.PASSED:
        raise typer.Exit(code=0)
    else:
        raise typer.Exit(code=1)


@app.command()
def validate(
    event_log: Path = typer.Argument(
        ...,
        help="Path to the recorded event log (YAML or JSON)",
        exists=True,
        readable=True,
    ),
):
    """
    Validate an event log without rendering it.
    """
    console.print(f"\n📄 Validating: {event_log}")

    log = load_log_or_exit(event_log)

    console.print(f"\n[green]✅ Valid event log[/green]")
    console.print(f"   Declared tests: {len(log.suite.all_tests())}")
    console.print(f"   Results: {len(log.results)}")
    console.print(f"   Run status: {log.run.status}")

    table = Table(title="Results")
    table.add_column("Test", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("File")
    table.add_column("Attachments", justify="right")

    for event in log.results:
        location = event.test.location
        table.add_row(
            event.test.title,
            event.result.status,
            location.file if location else "",
            str(len(event.result.attachments)),
        )

    console.print()
    console.print(table)
    raise typer.Exit(code=0)


@app.command()
def info():
    """
    Show information about Scribe.
    """
    console.print(f"""
📝 [bold]Scribe[/bold] v{__version__}

Markdown Reports for Test Runs

[bold]Features:[/bold]
  • Summary table with pass/fail/skip counts
  • Tests grouped by source file
  • Nested step traces and error stacks
  • Screenshot export alongside the report

[bold]Quick Start:[/bold]
  scribe render runs/nightly.yaml --output-dir md-report
  scribe validate runs/nightly.yaml
""")


if __name__ == "__main__":
    app()
