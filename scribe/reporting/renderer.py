"""
Markdown rendering of accumulated outcomes.

This module turns run metadata plus the ordered outcome list into the
final Markdown document. Output depends only on its inputs, so two
renders of the same data with the same timestamp are byte-identical.
"""

from __future__ import annotations

import posixpath
from collections.abc import Sequence
from datetime import datetime

from .models import (
    RunMetadata,
    RunStatus,
    TestOutcome,
    TestStatus,
    format_duration,
    status_glyph,
    step_glyph,
)

DEFAULT_TITLE = "Test Report"
UNKNOWN_FILE = "Unknown File"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


def group_by_file(outcomes: Sequence[TestOutcome]) -> dict[str, list[TestOutcome]]:
    """
    Group outcomes by the base name of their source file.

    Keys come back sorted; each group keeps arrival order.
    """
    groups: dict[str, list[TestOutcome]] = {}
    for outcome in outcomes:
        key = _basename(outcome.file_path) if outcome.file_path else UNKNOWN_FILE
        groups.setdefault(key, []).append(outcome)
    return {key: groups[key] for key in sorted(groups)}


def _basename(file_path: str) -> str:
    # Host paths may use either separator regardless of the platform we run on
    return posixpath.basename(file_path.replace("\\", "/"))


class MarkdownRenderer:
    """Renders a run into a Markdown document."""

    def __init__(self, title: str = DEFAULT_TITLE):
        self.title = title

    def render(
        self,
        meta: RunMetadata,
        outcomes: Sequence[TestOutcome],
        generated_at: datetime,
    ) -> str:
        """
        Render the full report.

        Args:
            meta: Completed run metadata
            outcomes: Accumulated outcomes in arrival order
            generated_at: Timestamp printed in the header

        Returns:
            The Markdown document
        """
        lines: list[str] = [
            f"# {self.title}",
            "",
            f"**Generated:** {generated_at.strftime(TIMESTAMP_FORMAT)}",
            "",
        ]
        lines.extend(self._summary(meta, outcomes))

        for file_name, tests in group_by_file(outcomes).items():
            lines.append(f"## {file_name}")
            lines.append("")
            for outcome in tests:
                lines.extend(self._test_section(outcome))

        return "\n".join(lines) + "\n"

    def _summary(self, meta: RunMetadata, outcomes: Sequence[TestOutcome]) -> list[str]:
        passed = sum(1 for t in outcomes if t.status == TestStatus.PASSED)
        failed = sum(1 for t in outcomes if t.status == TestStatus.FAILED)
        skipped = sum(1 for t in outcomes if t.status == TestStatus.SKIPPED)
        run_status = meta.status or RunStatus.UNKNOWN

        return [
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| **Total Tests** | {len(outcomes)} |",
            f"| **Passed** | {passed} |",
            f"| **Failed** | {failed} |",
            f"| **Skipped** | {skipped} |",
            f"| **Duration** | {format_duration(meta.duration_ms)} |",
            f"| **Status** | {run_status.value.upper()} |",
            "",
        ]

    def _test_section(self, outcome: TestOutcome) -> list[str]:
        lines = [
            f"### {status_glyph(outcome.status)} {outcome.title}",
            "",
            f"**Status:** {outcome.status.value.upper()} | **Duration:** {format_duration(outcome.duration)}",
            "",
        ]

        if outcome.error is not None:
            lines.extend(self._error_block(outcome))

        if outcome.steps:
            for step in outcome.steps:
                indent = "  " * step.level
                line = f"{indent}- {step_glyph(step.category)} {step.title}"
                if step.duration > 0:
                    line += f" ({format_duration(step.duration)})"
                lines.append(line)
                if step.error:
                    lines.append(f"{indent}  - ❌ Step failed")
            lines.append("")

        if outcome.screenshots:
            lines.append("**Screenshots:**")
            for screenshot in outcome.screenshots:
                lines.append(f"- 📸 {screenshot.name}: ![{screenshot.name}]({screenshot.path})")
            lines.append("")

        return lines

    def _error_block(self, outcome: TestOutcome) -> list[str]:
        error = outcome.error
        lines = ["**Error:**", "```"]

        if error.message:
            lines.append(error.message)

        if error.location is not None:
            lines.append("")
            lines.append(f"Location: {error.location}")

        if error.stack:
            lines.append("")
            lines.append("Stack Trace:")
            lines.append(error.stack)

        lines.append("```")
        lines.append("")
        return lines
