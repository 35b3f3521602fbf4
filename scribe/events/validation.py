"""
Validation for recorded event logs.

This module contains the validation logic that checks raw parsed YAML
against the event-log schema and reports errors with helpful messages.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "results[0].attachments[1].path"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Event Log Validator
# ─────────────────────────────────────────────────────────────────────────────

class EventLogValidator:
    """Validates raw parsed YAML against the event-log schema."""

    REQUIRED_TOP_LEVEL = {"version", "suite", "results", "run"}
    OPTIONAL_TOP_LEVEL: set[str] = set()

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.test_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_suite()
        self._validate_results()
        self._validate_run()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing, key=str):
            self.result.add_error(
                str(key),
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your event log"
            )

        for key in sorted(unknown, key=str):
            self.result.add_error(
                str(key),
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_suite(self) -> None:
        suite = self.data.get("suite")
        if not isinstance(suite, dict):
            self.result.add_error("suite", "Must be an object", value=suite)
            return

        tests = suite.get("tests", [])
        if not isinstance(tests, list):
            self.result.add_error("suite.tests", "Must be a list", value=tests)
            return

        for i, test in enumerate(tests):
            path = f"suite.tests[{i}]"
            if not isinstance(test, dict):
                self.result.add_error(path, "Must be an object", value=test)
                continue

            test_id = test.get("id")
            if not isinstance(test_id, str) or not test_id.strip():
                self.result.add_error(
                    f"{path}.id",
                    "Must be a non-empty string",
                    value=test_id
                )
            elif test_id in self.test_ids:
                self.result.add_error(
                    f"{path}.id",
                    f"Duplicate test id '{test_id}'",
                    suggestion="Test ids must be unique within a suite"
                )
            else:
                self.test_ids.add(test_id)

            if not isinstance(test.get("title"), str):
                self.result.add_error(
                    f"{path}.title",
                    "Must be a string",
                    value=test.get("title")
                )

            if "location" in test:
                self._validate_location(f"{path}.location", test["location"])

    def _validate_results(self) -> None:
        results = self.data.get("results")
        if not isinstance(results, list):
            self.result.add_error("results", "Must be a list", value=results)
            return

        for i, entry in enumerate(results):
            path = f"results[{i}]"
            if not isinstance(entry, dict):
                self.result.add_error(path, "Must be an object", value=entry)
                continue

            test_ref = entry.get("test")
            if not isinstance(test_ref, str):
                self.result.add_error(
                    f"{path}.test",
                    "Must be a string",
                    value=test_ref,
                    suggestion="Use an id from 'suite.tests'"
                )
            elif test_ref not in self.test_ids:
                self.result.add_error(
                    f"{path}.test",
                    "References an unknown test id",
                    value=test_ref,
                    suggestion="Declare the test under 'suite.tests' first"
                )

            if not isinstance(entry.get("status"), str):
                self.result.add_error(
                    f"{path}.status",
                    "Must be a string",
                    value=entry.get("status")
                )

            self._validate_duration(f"{path}.duration", entry.get("duration", 0))

            retry = entry.get("retry", 0)
            if not isinstance(retry, int) or isinstance(retry, bool) or retry < 0:
                self.result.add_error(
                    f"{path}.retry",
                    "Must be a non-negative integer",
                    value=retry
                )

            if entry.get("error") is not None:
                self._validate_error(f"{path}.error", entry["error"])

            self._validate_attachments(f"{path}.attachments", entry.get("attachments", []))
            self._validate_steps(f"{path}.steps", entry.get("steps", []))

    def _validate_run(self) -> None:
        run = self.data.get("run")
        if not isinstance(run, dict):
            self.result.add_error("run", "Must be an object", value=run)
            return
        if not isinstance(run.get("status"), str):
            self.result.add_error(
                "run.status",
                "Must be a string",
                value=run.get("status"),
                suggestion="Use one of: passed, failed, timedout, interrupted"
            )

    def _validate_duration(self, path: str, duration: Any) -> None:
        if duration is None:
            return
        if not isinstance(duration, int) or isinstance(duration, bool):
            self.result.add_error(
                path,
                "Must be an integer number of milliseconds",
                value=duration
            )
        elif duration < 0:
            self.result.add_error(path, "Must be >= 0", value=duration)

    def _validate_location(self, path: str, location: Any) -> None:
        if not isinstance(location, dict):
            self.result.add_error(path, "Must be an object", value=location)
            return
        if not isinstance(location.get("file"), str):
            self.result.add_error(
                f"{path}.file",
                "Must be a string",
                value=location.get("file")
            )
        for key in ("line", "column"):
            value = location.get(key, 0)
            if not isinstance(value, int) or isinstance(value, bool):
                self.result.add_error(f"{path}.{key}", "Must be an integer", value=value)

    def _validate_error(self, path: str, error: Any) -> None:
        if not isinstance(error, dict):
            self.result.add_error(path, "Must be an object", value=error)
            return
        for key in ("message", "stack"):
            value = error.get(key)
            if value is not None and not isinstance(value, str):
                self.result.add_error(f"{path}.{key}", "Must be a string", value=value)
        if error.get("location") is not None:
            self._validate_location(f"{path}.location", error["location"])

    def _validate_attachments(self, path: str, attachments: Any) -> None:
        if not isinstance(attachments, list):
            self.result.add_error(path, "Must be a list", value=attachments)
            return

        for i, attachment in enumerate(attachments):
            item_path = f"{path}[{i}]"
            if not isinstance(attachment, dict):
                self.result.add_error(item_path, "Must be an object", value=attachment)
                continue

            if not isinstance(attachment.get("content_type"), str):
                self.result.add_error(
                    f"{item_path}.content_type",
                    "Must be a string",
                    value=attachment.get("content_type"),
                    suggestion="e.g. 'image/png'"
                )

            if "path" in attachment and "body_base64" in attachment:
                self.result.add_error(
                    item_path,
                    "Cannot have both 'path' and 'body_base64'",
                    suggestion="Use 'path' for files on disk, 'body_base64' for inline data"
                )
            elif "body_base64" in attachment:
                self._validate_base64(f"{item_path}.body_base64", attachment["body_base64"])
            elif "path" in attachment and not isinstance(attachment["path"], str):
                self.result.add_error(
                    f"{item_path}.path",
                    "Must be a string",
                    value=attachment["path"]
                )

    def _validate_base64(self, path: str, body: Any) -> None:
        if not isinstance(body, str):
            self.result.add_error(path, "Must be a base64 string", value=body)
            return
        try:
            base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            self.result.add_error(
                path,
                "Invalid base64 data",
                suggestion="Encode the bytes with standard base64"
            )

    def _validate_steps(self, path: str, steps: Any) -> None:
        if not isinstance(steps, list):
            self.result.add_error(path, "Must be a list", value=steps)
            return

        for i, step in enumerate(steps):
            step_path = f"{path}[{i}]"
            if not isinstance(step, dict):
                self.result.add_error(step_path, "Must be an object", value=step)
                continue
            if not isinstance(step.get("title"), str):
                self.result.add_error(
                    f"{step_path}.title",
                    "Must be a string",
                    value=step.get("title")
                )
            category = step.get("category")
            if category is not None and not isinstance(category, str):
                self.result.add_error(f"{step_path}.category", "Must be a string", value=category)
            self._validate_duration(f"{step_path}.duration", step.get("duration"))
            if step.get("error") is not None:
                self._validate_error(f"{step_path}.error", step["error"])
            self._validate_steps(f"{step_path}.steps", step.get("steps", []))
