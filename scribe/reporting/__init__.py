"""
Markdown Reporting for Test Runs

This package turns a host's stream of test events into a single
Markdown document plus a side directory of exported screenshots.

Features:
    - Summary table with aggregate counts and run duration
    - One section per source file, tests in arrival order
    - Flattened, indented step traces
    - Error message, location and stack trace per failed test
    - Screenshot export with generated, collision-free names

Usage:
    from scribe.reporting import MarkdownReporter, ReporterOptions

    reporter = MarkdownReporter(ReporterOptions(output_dir="md-report"))

    reporter.on_begin(config, suite)
    for test, result in completed:
        reporter.on_test_end(test, result)

    path = reporter.on_end(full_result)
    # md-report/index.md, md-report/screenshots/<uuid>.png
"""

# Models
from .models import (
    DuplicatePolicy,
    ErrorLocation,
    OutcomeError,
    RunMetadata,
    RunStatus,
    ScreenshotRef,
    StepEntry,
    TestOutcome,
    TestStatus,
    format_duration,
    status_glyph,
    step_glyph,
)

# Pipeline
from .attachments import AttachmentExporter
from .accumulator import OutcomeAccumulator, flatten_steps
from .renderer import MarkdownRenderer, group_by_file

# Reporter
from .options import ReporterOptions, load_options, parse_options_yaml
from .reporter import MarkdownReporter

__all__ = [
    # Models
    "DuplicatePolicy",
    "ErrorLocation",
    "OutcomeError",
    "RunMetadata",
    "RunStatus",
    "ScreenshotRef",
    "StepEntry",
    "TestOutcome",
    "TestStatus",
    "format_duration",
    "status_glyph",
    "step_glyph",
    # Pipeline
    "AttachmentExporter",
    "OutcomeAccumulator",
    "flatten_steps",
    "MarkdownRenderer",
    "group_by_file",
    # Reporter
    "ReporterOptions",
    "load_options",
    "parse_options_yaml",
    "MarkdownReporter",
]
