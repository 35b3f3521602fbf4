"""
Host-facing Markdown reporter.

This module provides the MarkdownReporter class, which receives the
host's lifecycle events and writes the Markdown report at run end.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .accumulator import OutcomeAccumulator
from .attachments import SCREENSHOTS_DIR, AttachmentExporter
from .models import RunMetadata, RunStatus, TestOutcome
from .options import ReporterOptions, load_options
from .renderer import MarkdownRenderer

if TYPE_CHECKING:
    from ..events import EventLog, FullResult, Suite, TestCase, TestResult

logger = logging.getLogger(__name__)


class MarkdownReporter:
    """
    Builds a Markdown report from host lifecycle events.

    The host calls, in order: ``on_begin`` once, ``on_test_begin`` /
    ``on_test_end`` per test, and ``on_end`` once. Each reporter instance
    owns the state of the run it is attached to.

    Example:
        from scribe.reporting import MarkdownReporter, ReporterOptions

        reporter = MarkdownReporter(ReporterOptions(output_dir="reports"))

        reporter.on_begin(config, suite)
        reporter.on_test_end(test, result)
        path = reporter.on_end(full_result)
        print(path.read_text())
    """

    def __init__(self, options: ReporterOptions | None = None):
        self.options = options or ReporterOptions()
        self.output_dir = Path(self.options.output_dir)
        self.exporter = AttachmentExporter(
            self.output_dir / SCREENSHOTS_DIR,
            generate_id=self.options.generate_uuid,
        )
        self.accumulator = OutcomeAccumulator(
            self.output_dir,
            self.exporter,
            duplicate_policy=self.options.duplicate_policy,
        )
        self.renderer = MarkdownRenderer(title=self.options.title)

    @classmethod
    def from_config(cls, path: str | Path, **overrides: Any) -> MarkdownReporter:
        """
        Create a reporter from a YAML config file.

        Args:
            path: Path to the config file
            **overrides: ReporterOptions fields that take precedence
                (e.g. injected ``generate_uuid``)

        Raises:
            ValueError: If the config file is invalid
            TypeError: If an override is not a ReporterOptions field
        """
        options, result = load_options(path)
        if options is None:
            raise ValueError(str(result))
        return cls(replace(options, **overrides))

    @property
    def report_path(self) -> Path:
        return self.options.report_path

    def on_begin(self, config: Any, suite: Suite) -> None:
        """Start a run: reset state and recreate the output directory."""
        meta = RunMetadata(
            started_at=self.options.get_current_date(),
            declared_tests=len(suite.all_tests()),
        )
        self.accumulator.begin(meta)
        logger.info(f"📝 Markdown Reporter: Starting test run with {meta.declared_tests} tests")

    def on_test_begin(self, test: TestCase, result: TestResult) -> None:
        """Accepted for lifecycle symmetry; nothing is recorded."""

    def on_test_end(self, test: TestCase, result: TestResult) -> TestOutcome:
        """Record a completed test."""
        return self.accumulator.record(test, result)

    def on_end(self, result: FullResult) -> Path:
        """
        Finish the run and write the report.

        Returns:
            Path of the written report

        Raises:
            OSError: If the report cannot be written
        """
        meta = self.accumulator.meta
        if meta is None:
            raise RuntimeError("on_end() called before on_begin()")

        meta.complete(self.options.get_current_date(), RunStatus.parse(result.status))

        markdown = self.renderer.render(
            meta,
            self.accumulator.snapshot(),
            generated_at=self.options.get_current_date(),
        )

        output_path = self.report_path
        output_path.write_text(markdown, encoding="utf-8")
        logger.info(f"📝 Markdown report generated: {output_path}")
        return output_path

    def replay(self, log: EventLog, config: Any = None) -> Path:
        """
        Drive a full run from a recorded event log.

        Returns:
            Path of the written report
        """
        self.on_begin(config, log.suite)
        for event in log.results:
            self.on_test_begin(event.test, event.result)
            self.on_test_end(event.test, event.result)
        return self.on_end(log.run)
