"""Shared fixtures for reporter tests."""

import itertools
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from scribe.events import (
    Attachment,
    HostStep,
    Location,
    Suite,
    TestCase,
    TestResult,
)
from scribe.reporting import MarkdownReporter, ReporterOptions

FIXED_DATE = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def uuid_sequence() -> Callable[[], str]:
    """Deterministic identifiers: test-uuid-1, test-uuid-2, ..."""
    counter = itertools.count(1)
    return lambda: f"test-uuid-{next(counter)}"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_DATE


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "md-report"


@pytest.fixture
def reporter(
    output_dir: Path,
    uuid_sequence: Callable[[], str],
    fixed_clock: Callable[[], datetime],
) -> MarkdownReporter:
    return MarkdownReporter(ReporterOptions(
        output_dir=output_dir,
        filename="test-report.md",
        generate_uuid=uuid_sequence,
        get_current_date=fixed_clock,
    ))


@pytest.fixture
def login_test() -> TestCase:
    return TestCase(
        id="test-1",
        title="should login successfully",
        location=Location(file="/test/project/tests/login.spec.ts", line=10, column=3),
    )


@pytest.fixture
def login_result() -> TestResult:
    return TestResult(
        status="passed",
        duration=1500,
        attachments=[
            Attachment(name="screenshot", content_type="image/png", body=b"fake-png-data"),
        ],
        steps=[
            HostStep(title="Navigate to login page", category="test.step", duration=500),
            HostStep(
                title="Fill username and password",
                category="test.step",
                duration=300,
                steps=[
                    HostStep(title="Type username", category="test.step", duration=150),
                    HostStep(title="Type password", category="test.step", duration=150),
                ],
            ),
            HostStep(title="Click login button", category="test.step", duration=700),
        ],
    )


@pytest.fixture
def login_suite(login_test: TestCase) -> Suite:
    return Suite(tests=[login_test])
