"""
Outcome accumulation for a single run.

This module flattens host step trees and collects normalized
TestOutcome records in arrival order.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

from ..events.models import HostError, HostStep, TestCase, TestResult
from .attachments import AttachmentExporter
from .models import (
    DuplicatePolicy,
    ErrorLocation,
    OutcomeError,
    RunMetadata,
    StepEntry,
    TestOutcome,
    TestStatus,
)

DEFAULT_STEP_CATEGORY = "unknown"


def flatten_steps(steps: Sequence[HostStep], level: int = 0) -> list[StepEntry]:
    """
    Flatten a step tree depth-first, pre-order.

    Every parent precedes its children, and children sit exactly one
    level below their parent.

    Args:
        steps: Sibling steps at ``level``
        level: Nesting level of ``steps``

    Returns:
        Flat ordered list of StepEntry
    """
    entries: list[StepEntry] = []
    for step in steps:
        entries.append(StepEntry(
            title=step.title,
            category=step.category or DEFAULT_STEP_CATEGORY,
            duration=max(0, int(step.duration or 0)),
            level=level,
            error=step.error.message if step.error and step.error.message else None,
        ))
        if step.steps:
            entries.extend(flatten_steps(step.steps, level + 1))
    return entries


def extract_error(error: HostError | None) -> OutcomeError | None:
    """Copy message, stack and location off a host error, as present."""
    if error is None:
        return None

    location = None
    if error.location is not None:
        location = ErrorLocation(
            file=error.location.file,
            line=error.location.line,
            column=error.location.column,
        )

    return OutcomeError(message=error.message, stack=error.stack, location=location)


class OutcomeAccumulator:
    """
    Append-only collection of test outcomes for one run.

    Owns the report output directory: ``begin`` recreates it from scratch,
    so nothing from a previous run survives.

    Example:
        accumulator = OutcomeAccumulator(Path("md-report"), exporter)
        accumulator.begin(RunMetadata(started_at=now, declared_tests=3))
        accumulator.record(test, result)
        outcomes = accumulator.snapshot()
    """

    def __init__(
        self,
        output_dir: str | Path,
        exporter: AttachmentExporter,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.APPEND_ALL,
    ):
        self.output_dir = Path(output_dir)
        self.exporter = exporter
        self.duplicate_policy = duplicate_policy
        self.meta: RunMetadata | None = None
        self._outcomes: list[TestOutcome] = []

    def begin(self, meta: RunMetadata) -> None:
        """
        Reset run-scoped state and recreate the output directory.

        Raises:
            OSError: If the output directory cannot be removed or created
        """
        self._outcomes = []
        self.meta = meta

        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)
        self.exporter.export_dir.mkdir(parents=True, exist_ok=True)

    def record(self, test: TestCase, result: TestResult) -> TestOutcome:
        """
        Normalize one test completion and append it.

        Args:
            test: The test that finished
            result: Its result, including steps and attachments

        Returns:
            The appended TestOutcome
        """
        screenshots = self.exporter.export(result.attachments)

        outcome = TestOutcome(
            title=test.title,
            status=TestStatus.parse(result.status),
            duration=max(0, int(result.duration or 0)),
            file_path=test.location.file if test.location else None,
            error=extract_error(result.error),
            steps=tuple(flatten_steps(result.steps)),
            screenshots=tuple(screenshots),
            test_id=test.id,
            retry=result.retry,
        )

        self._outcomes.append(outcome)
        return outcome

    def snapshot(self) -> list[TestOutcome]:
        """
        Outcomes in arrival order, filtered by the duplicate policy.

        With KEEP_LATEST only the last outcome per test id is returned,
        at the position where it arrived.
        """
        if self.duplicate_policy == DuplicatePolicy.APPEND_ALL:
            return list(self._outcomes)

        last_index: dict[str, int] = {}
        for i, outcome in enumerate(self._outcomes):
            if outcome.test_id is not None:
                last_index[outcome.test_id] = i

        return [
            outcome
            for i, outcome in enumerate(self._outcomes)
            if outcome.test_id is None or last_index[outcome.test_id] == i
        ]

    def __len__(self) -> int:
        return len(self._outcomes)
