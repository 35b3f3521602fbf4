"""
Event-log parser.

This module converts validated YAML data into typed EventLog structures.
"""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Any

from .models import (
    Attachment,
    EventLog,
    FullResult,
    HostError,
    HostStep,
    Location,
    Suite,
    TestCase,
    TestEndEvent,
    TestResult,
)


class EventLogParser:
    """Parses and converts validated YAML to a typed EventLog."""

    def __init__(self, data: dict[str, Any], base_dir: str | Path | None = None):
        self.data = data
        # Relative attachment paths are resolved against this directory
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def parse(self) -> EventLog:
        """Convert validated data to a typed EventLog."""
        suite = self._parse_suite()
        tests_by_id = {test.id: test for test in suite.tests}

        return EventLog(
            suite=suite,
            results=[
                TestEndEvent(
                    test=tests_by_id[entry["test"]],
                    result=self._parse_result(entry),
                )
                for entry in self.data.get("results", [])
            ],
            run=FullResult(status=self.data["run"]["status"]),
        )

    def _parse_suite(self) -> Suite:
        return Suite(tests=[
            TestCase(
                id=test["id"],
                title=test["title"],
                location=self._parse_location(test.get("location")),
            )
            for test in self.data["suite"].get("tests", [])
        ])

    def _parse_result(self, entry: dict) -> TestResult:
        return TestResult(
            status=entry["status"],
            duration=entry.get("duration") or 0,
            error=self._parse_error(entry.get("error")),
            attachments=[self._parse_attachment(a) for a in entry.get("attachments", [])],
            steps=[self._parse_step(s) for s in entry.get("steps", [])],
            retry=entry.get("retry", 0),
        )

    def _parse_location(self, data: dict | None) -> Location | None:
        if data is None:
            return None
        return Location(
            file=data["file"],
            line=data.get("line", 0),
            column=data.get("column", 0),
        )

    def _parse_error(self, data: dict | None) -> HostError | None:
        if data is None:
            return None
        return HostError(
            message=data.get("message"),
            stack=data.get("stack"),
            location=self._parse_location(data.get("location")),
        )

    def _parse_attachment(self, data: dict) -> Attachment:
        body = None
        if "body_base64" in data:
            body = base64.b64decode(data["body_base64"])

        path = data.get("path")
        if path is not None and self.base_dir is not None and not Path(path).is_absolute():
            path = str(self.base_dir / path)

        return Attachment(
            content_type=data["content_type"],
            name=data.get("name"),
            body=body,
            path=path,
        )

    def _parse_step(self, data: dict) -> HostStep:
        return HostStep(
            title=data["title"],
            category=data.get("category"),
            duration=data.get("duration"),
            error=self._parse_error(data.get("error")),
            steps=[self._parse_step(s) for s in data.get("steps", [])],
        )
