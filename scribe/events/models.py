"""
Typed records delivered by a test-execution host.

This module contains the dataclasses a host hands to the reporter:
the declared suite, per-test cases and results, their step trees and
attachments, and the final run result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ImageKind(str, Enum):
    """Closed classification of an attachment's content type."""
    PNG = "png"
    JPEG = "jpeg"
    OTHER = "other"


# Only these exact content types count as screenshot evidence
IMAGE_CONTENT_TYPES = {
    "image/png": ImageKind.PNG,
    "image/jpeg": ImageKind.JPEG,
}


# ─────────────────────────────────────────────────────────────────────────────
# Locations & Errors
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Location:
    """Position in a source file."""
    file: str
    line: int = 0
    column: int = 0


@dataclass
class HostError:
    """Error reported by the host for a test or a step."""
    message: str | None = None
    stack: str | None = None
    location: Location | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Attachments & Steps
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Attachment:
    """
    Binary artifact attached to a test result.

    Carries either inline bytes (``body``) or a reference to a file on
    disk (``path``). When both are present the inline body wins.
    """
    content_type: str
    name: str | None = None
    body: bytes | None = None
    path: str | None = None

    @property
    def image_kind(self) -> ImageKind:
        return IMAGE_CONTENT_TYPES.get(self.content_type, ImageKind.OTHER)


@dataclass
class HostStep:
    """A (possibly nested) step reported inside a test result."""
    title: str
    category: str | None = None
    duration: int | None = None
    error: HostError | None = None
    steps: list[HostStep] = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Tests & Runs
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class TestCase:
    """A declared test, as enumerated by the host."""
    __test__ = False  # not a pytest class

    id: str
    title: str
    location: Location | None = None


@dataclass
class TestResult:
    """The outcome of one execution of a TestCase."""
    __test__ = False  # not a pytest class

    status: str
    duration: int = 0
    error: HostError | None = None
    attachments: list[Attachment] = field(default_factory=list)
    steps: list[HostStep] = field(default_factory=list)
    retry: int = 0


@dataclass
class Suite:
    """Root suite announced at run begin."""
    tests: list[TestCase] = field(default_factory=list)

    def all_tests(self) -> list[TestCase]:
        """Flat list of every declared test."""
        return list(self.tests)


@dataclass
class FullResult:
    """Final run-level result delivered at run end."""
    status: str


@dataclass
class TestEndEvent:
    """One recorded test completion."""
    __test__ = False  # not a pytest class

    test: TestCase
    result: TestResult


@dataclass
class EventLog:
    """A complete recorded run, replayable through a reporter."""
    suite: Suite
    results: list[TestEndEvent] = field(default_factory=list)
    run: FullResult = field(default_factory=lambda: FullResult(status="passed"))
