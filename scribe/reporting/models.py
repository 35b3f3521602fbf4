"""
Report data models for test runs.

This module defines the normalized records the reporter accumulates
(outcomes, flattened steps, screenshot references), the run-level
metadata, and the formatting tables shared by the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class TestStatus(str, Enum):
    """Status of a single test outcome."""
    __test__ = False  # not a pytest class

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMED_OUT = "timedOut"
    INTERRUPTED = "interrupted"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> TestStatus:
        """Map a host status string onto the enum, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unrecognized test status {value!r}, using 'unknown'")
            return cls.UNKNOWN


class RunStatus(str, Enum):
    """Overall status of a test run, as reported by the host."""
    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timedout"
    INTERRUPTED = "interrupted"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> RunStatus:
        """Map a host run status onto the enum, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unrecognized run status {value!r}, using 'unknown'")
            return cls.UNKNOWN


class DuplicatePolicy(str, Enum):
    """How repeated completions of the same test are reported."""
    APPEND_ALL = "append_all"
    KEEP_LATEST = "keep_latest"


# ─────────────────────────────────────────────────────────────────────────────
# Outcome Records
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StepEntry:
    """One step of a flattened step tree; level 0 is top-level."""
    title: str
    category: str
    duration: int
    level: int
    error: str | None = None


@dataclass(frozen=True)
class ScreenshotRef:
    """An exported screenshot, referenced relative to the report file."""
    name: str
    path: str


@dataclass(frozen=True)
class ErrorLocation:
    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class OutcomeError:
    """Error captured from a test result; every field is optional."""
    message: str | None = None
    stack: str | None = None
    location: ErrorLocation | None = None


@dataclass(frozen=True)
class TestOutcome:
    """
    Normalized record of one completed test.

    Built once per test-end event and never mutated afterwards.
    """
    __test__ = False  # not a pytest class

    title: str
    status: TestStatus
    duration: int
    file_path: str | None = None
    error: OutcomeError | None = None
    steps: tuple[StepEntry, ...] = ()
    screenshots: tuple[ScreenshotRef, ...] = ()
    test_id: str | None = None
    retry: int = 0


@dataclass
class RunMetadata:
    """
    Run-level metadata.

    Created at run begin, completed exactly once at run end.
    """
    started_at: datetime
    declared_tests: int = 0
    ended_at: datetime | None = None
    status: RunStatus | None = None

    @property
    def is_complete(self) -> bool:
        return self.ended_at is not None

    def complete(self, ended_at: datetime, status: RunStatus) -> None:
        """Record run end time and final status."""
        if self.is_complete:
            raise RuntimeError("Run metadata has already been completed")
        self.ended_at = ended_at
        self.status = status

    @property
    def duration_ms(self) -> int:
        """Wall-clock duration between run begin and run end."""
        if self.ended_at is None:
            return 0
        delta = self.ended_at - self.started_at
        return max(0, round(delta.total_seconds() * 1000))


# ─────────────────────────────────────────────────────────────────────────────
# Formatting
# ─────────────────────────────────────────────────────────────────────────────

STATUS_GLYPHS = {
    TestStatus.PASSED: "✅",
    TestStatus.FAILED: "❌",
    TestStatus.SKIPPED: "⏭️",
    TestStatus.TIMED_OUT: "⏰",
    TestStatus.INTERRUPTED: "⏸️",
}
FALLBACK_STATUS_GLYPH = "❓"

STEP_GLYPHS = {
    "test.step": "🔹",
    "fixture": "⚙️",
    "hook": "🪝",
    "test": "🧪",
}
FALLBACK_STEP_GLYPH = "📝"


def status_glyph(status: TestStatus | str) -> str:
    """Get glyph for a test status."""
    return STATUS_GLYPHS.get(status, FALLBACK_STATUS_GLYPH)


def step_glyph(category: str) -> str:
    """Get glyph for a step category."""
    return STEP_GLYPHS.get(category, FALLBACK_STEP_GLYPH)


def format_duration(ms: int) -> str:
    """
    Format a duration in milliseconds.

    Values below one second render as ``<n>ms``; anything longer renders
    as seconds with two decimals (``1.50s``), never as minutes.
    """
    if ms < 1000:
        return f"{ms}ms"
    return f"{ms / 1000:.2f}s"
