"""End-to-end tests for MarkdownReporter."""

import itertools
import logging
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from scribe.events import (
    Attachment,
    FullResult,
    HostError,
    HostStep,
    Location,
    Suite,
    TestCase,
    TestResult,
)
from scribe.reporting import DuplicatePolicy, MarkdownReporter, ReporterOptions

EXPECTED_LOGIN_REPORT = """\
# Test Report

**Generated:** 2025/01/01 12:00:00

## Summary

| Metric | Value |
|--------|-------|
| **Total Tests** | 1 |
| **Passed** | 1 |
| **Failed** | 0 |
| **Skipped** | 0 |
| **Duration** | 0ms |
| **Status** | PASSED |

## login.spec.ts

### ✅ should login successfully

**Status:** PASSED | **Duration:** 1.50s

- 🔹 Navigate to login page (500ms)
- 🔹 Fill username and password (300ms)
  - 🔹 Type username (150ms)
  - 🔹 Type password (150ms)
- 🔹 Click login button (700ms)

**Screenshots:**
- 📸 screenshot: ![screenshot](screenshots/test-uuid-1.png)

"""


def test_complete_execution_flow(
    reporter: MarkdownReporter,
    output_dir: Path,
    login_suite: Suite,
    login_test: TestCase,
    login_result: TestResult,
) -> None:
    """begin -> test begin -> test end -> end writes the report and one screenshot."""
    reporter.on_begin(None, login_suite)
    reporter.on_test_begin(login_test, login_result)
    reporter.on_test_end(login_test, login_result)
    report_path = reporter.on_end(FullResult(status="passed"))

    assert report_path == output_dir / "test-report.md"
    assert report_path.read_text(encoding="utf-8") == EXPECTED_LOGIN_REPORT
    assert [p.name for p in (output_dir / "screenshots").iterdir()] == ["test-uuid-1.png"]


def test_failed_tests_with_errors(
    reporter: MarkdownReporter,
    output_dir: Path,
) -> None:
    test = TestCase(
        id="cart-1",
        title="should add item to cart",
        location=Location(file="/proj/tests/cart.spec.ts", line=4, column=3),
    )
    result = TestResult(
        status="failed",
        duration=820,
        error=HostError(
            message="Expected 5, got 3",
            stack="Error: Expected 5, got 3\n    at cart.spec.ts:12:5",
            location=Location(file="/proj/tests/cart.spec.ts", line=12, column=5),
        ),
        steps=[
            HostStep(title="Add item", category="test.step", duration=420,
                     error=HostError(message="Item not found")),
        ],
    )

    reporter.on_begin(None, Suite(tests=[test]))
    reporter.on_test_end(test, result)
    markdown = reporter.on_end(FullResult(status="failed")).read_text(encoding="utf-8")

    assert "| **Failed** | 1 |" in markdown
    assert "| **Status** | FAILED |" in markdown
    assert "### ❌ should add item to cart" in markdown
    assert "Location: /proj/tests/cart.spec.ts:12:5" in markdown
    assert "- 🔹 Add item (420ms)\n  - ❌ Step failed\n" in markdown
    assert "**Screenshots:**" not in markdown


def test_screenshot_variations_share_one_counter(
    reporter: MarkdownReporter,
    output_dir: Path,
    tmp_path: Path,
) -> None:
    """Identifiers run across tests in processing order, not per test."""
    source = tmp_path / "temp-file.png"
    source.write_bytes(b"file-png")
    first = TestCase(id="a", title="first", location=Location(file="/p/shots.spec.ts"))
    second = TestCase(id="b", title="second", location=Location(file="/p/shots.spec.ts"))

    reporter.on_begin(None, Suite(tests=[first, second]))
    reporter.on_test_end(first, TestResult(status="passed", attachments=[
        Attachment(name="inline", content_type="image/png", body=b"png"),
        Attachment(name="photo", content_type="image/jpeg", body=b"jpg"),
    ]))
    reporter.on_test_end(second, TestResult(status="passed", attachments=[
        Attachment(name="trace", content_type="application/zip", path="/tmp/trace.zip"),
        Attachment(content_type="image/png", path=str(source)),
    ]))
    markdown = reporter.on_end(FullResult(status="passed")).read_text(encoding="utf-8")

    assert sorted(p.name for p in (output_dir / "screenshots").iterdir()) == [
        "test-uuid-1.png",
        "test-uuid-2.jpg",
        "test-uuid-3.png",
    ]
    assert "- 📸 Screenshot: ![Screenshot](screenshots/test-uuid-3.png)" in markdown


def test_broken_attachment_does_not_abort_test(
    reporter: MarkdownReporter,
    output_dir: Path,
) -> None:
    test = TestCase(id="e", title="should handle file copy errors", location=Location(file="/p/edge.spec.ts"))
    result = TestResult(status="passed", duration=200, attachments=[
        Attachment(name="error-screenshot", content_type="image/png", path="/non/existent/path/screenshot.png"),
    ])

    reporter.on_begin(None, Suite(tests=[test]))
    reporter.on_test_end(test, result)
    markdown = reporter.on_end(FullResult(status="passed")).read_text(encoding="utf-8")

    assert "### ✅ should handle file copy errors" in markdown
    assert "**Screenshots:**" not in markdown
    assert list((output_dir / "screenshots").iterdir()) == []


def test_unknown_status_renders_with_fallback_glyph(reporter: MarkdownReporter) -> None:
    test = TestCase(id="u", title="should handle unknown status", location=Location(file="/p/edge.spec.ts"))

    reporter.on_begin(None, Suite(tests=[test]))
    reporter.on_test_end(test, TestResult(status="unknown", duration=100))
    markdown = reporter.on_end(FullResult(status="passed")).read_text(encoding="utf-8")

    assert "### ❓ should handle unknown status" in markdown
    assert "| **Total Tests** | 1 |" in markdown
    assert "| **Passed** | 0 |" in markdown


def test_run_duration_uses_clock(tmp_path: Path, login_suite: Suite) -> None:
    start = datetime(2025, 1, 1, 12, 0, 0)
    ticks = itertools.chain(
        [start, start + timedelta(seconds=3, milliseconds=250)],
        itertools.repeat(start),
    )
    reporter = MarkdownReporter(ReporterOptions(
        output_dir=tmp_path / "out",
        get_current_date=lambda: next(ticks),
    ))

    reporter.on_begin(None, login_suite)
    markdown = reporter.on_end(FullResult(status="interrupted")).read_text(encoding="utf-8")

    assert "| **Duration** | 3.25s |" in markdown
    assert "| **Status** | INTERRUPTED |" in markdown
    assert (tmp_path / "out" / "index.md").exists()


def test_second_run_starts_clean(
    reporter: MarkdownReporter,
    output_dir: Path,
    login_suite: Suite,
    login_test: TestCase,
    login_result: TestResult,
) -> None:
    reporter.on_begin(None, login_suite)
    reporter.on_test_end(login_test, login_result)
    reporter.on_end(FullResult(status="passed"))

    second = MarkdownReporter(ReporterOptions(output_dir=output_dir, filename="test-report.md"))
    second.on_begin(None, login_suite)
    markdown = second.on_end(FullResult(status="passed")).read_text(encoding="utf-8")

    assert "| **Total Tests** | 0 |" in markdown
    assert list((output_dir / "screenshots").iterdir()) == []


def test_keep_latest_policy(tmp_path: Path) -> None:
    reporter = MarkdownReporter(ReporterOptions(
        output_dir=tmp_path / "out",
        duplicate_policy=DuplicatePolicy.KEEP_LATEST,
    ))
    flaky = TestCase(id="f", title="flaky", location=Location(file="/p/f.spec.ts"))

    reporter.on_begin(None, Suite(tests=[flaky]))
    reporter.on_test_end(flaky, TestResult(status="failed", retry=0))
    reporter.on_test_end(flaky, TestResult(status="passed", retry=1))
    markdown = reporter.on_end(FullResult(status="passed")).read_text(encoding="utf-8")

    assert "| **Total Tests** | 1 |" in markdown
    assert markdown.count("### ") == 1
    assert "### ✅ flaky" in markdown


def test_end_before_begin_raises(reporter: MarkdownReporter) -> None:
    with pytest.raises(RuntimeError):
        reporter.on_end(FullResult(status="passed"))


def test_unwritable_output_directory_propagates(tmp_path: Path, login_suite: Suite) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    reporter = MarkdownReporter(ReporterOptions(output_dir=blocker / "report"))

    with pytest.raises(OSError):
        reporter.on_begin(None, login_suite)


def test_from_config(tmp_path: Path, uuid_sequence) -> None:
    config = tmp_path / "scribe.yaml"
    config.write_text(f"output_dir: {tmp_path / 'configured'}\nfilename: report.md\ntitle: Nightly\n")

    reporter = MarkdownReporter.from_config(config, generate_uuid=uuid_sequence)

    assert reporter.report_path == tmp_path / "configured" / "report.md"
    assert reporter.options.title == "Nightly"
    assert reporter.options.generate_uuid is uuid_sequence


def test_from_config_rejects_invalid_file(tmp_path: Path) -> None:
    config = tmp_path / "scribe.yaml"
    config.write_text("duplicate_policy: sometimes\n")

    with pytest.raises(ValueError, match="duplicate_policy"):
        MarkdownReporter.from_config(config)


def test_from_config_rejects_unknown_override(tmp_path: Path) -> None:
    config = tmp_path / "scribe.yaml"
    config.write_text("filename: report.md\n")

    with pytest.raises(TypeError):
        MarkdownReporter.from_config(config, generate_uid=lambda: "x")


def test_begin_records_declared_test_count(
    reporter: MarkdownReporter,
    caplog: pytest.LogCaptureFixture,
) -> None:
    suite = Suite(tests=[
        TestCase(id="a", title="a"),
        TestCase(id="b", title="b"),
    ])

    with caplog.at_level(logging.INFO, logger="scribe.reporting.reporter"):
        reporter.on_begin(None, suite)

    assert reporter.accumulator.meta.declared_tests == 2
    assert "Starting test run with 2 tests" in caplog.text
