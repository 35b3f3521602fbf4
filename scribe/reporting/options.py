"""
Reporter configuration.

This module defines ReporterOptions and loads them from YAML config
files, validating them the same way event logs are validated.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from ..events.validation import ValidationResult
from .attachments import generate_uuid
from .models import DuplicatePolicy
from .renderer import DEFAULT_TITLE

DEFAULT_OUTPUT_DIR = "md-report"
DEFAULT_FILENAME = "index.md"


def current_date() -> datetime:
    """Default clock: local wall-clock time."""
    return datetime.now().astimezone()


@dataclass
class ReporterOptions:
    """
    Construction-time options for MarkdownReporter.

    ``generate_uuid`` and ``get_current_date`` are injectable so tests
    can pin file names and timestamps.
    """
    output_dir: str | Path = DEFAULT_OUTPUT_DIR
    filename: str = DEFAULT_FILENAME
    title: str = DEFAULT_TITLE
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.APPEND_ALL
    generate_uuid: Callable[[], str] = field(default=generate_uuid, repr=False)
    get_current_date: Callable[[], datetime] = field(default=current_date, repr=False)

    @property
    def report_path(self) -> Path:
        return Path(self.output_dir) / self.filename


# ─────────────────────────────────────────────────────────────────────────────
# Config Files
# ─────────────────────────────────────────────────────────────────────────────

class OptionsValidator:
    """Validates a raw parsed config mapping."""

    STRING_FIELDS = ("output_dir", "filename", "title")
    VALID_KEYS = set(STRING_FIELDS) | {"duplicate_policy"}
    VALID_POLICIES = {p.value for p in DuplicatePolicy}

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        for key in sorted(set(self.data) - self.VALID_KEYS, key=str):
            self.result.add_error(
                str(key),
                f"Unknown option '{key}'",
                suggestion=f"Valid options are: {', '.join(sorted(self.VALID_KEYS))}"
            )

        for key in self.STRING_FIELDS:
            if key not in self.data:
                continue
            value = self.data[key]
            if not isinstance(value, str) or not value.strip():
                self.result.add_error(key, "Must be a non-empty string", value=value)

        filename = self.data.get("filename")
        if isinstance(filename, str) and ("/" in filename or "\\" in filename):
            self.result.add_error(
                "filename",
                "Must be a bare file name",
                value=filename,
                suggestion="Put directories in 'output_dir' instead"
            )

        policy = self.data.get("duplicate_policy")
        if policy is not None and not isinstance(policy, str):
            self.result.add_error("duplicate_policy", "Must be a string", value=policy)
        elif policy is not None and policy not in self.VALID_POLICIES:
            self.result.add_error(
                "duplicate_policy",
                "Invalid duplicate policy",
                value=policy,
                suggestion=f"Valid policies: {', '.join(sorted(self.VALID_POLICIES))}"
            )

        return self.result


def parse_options_yaml(yaml_string: str) -> tuple[ReporterOptions | None, ValidationResult]:
    """
    Parse reporter options from a YAML string.

    An empty document yields the defaults.
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _options_from_data(data, "yaml")


def load_options(path: str | Path) -> tuple[ReporterOptions | None, ValidationResult]:
    """
    Load reporter options from a YAML config file.

    Args:
        path: Path to the config file

    Returns:
        Tuple of (ReporterOptions or None, ValidationResult)
    """
    path = Path(path)
    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(str(path), f"Invalid YAML syntax: {e}")
        return None, result

    return _options_from_data(data, str(path))


def _options_from_data(data: Any, source: str) -> tuple[ReporterOptions | None, ValidationResult]:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Config must be a YAML object",
            value=type(data).__name__
        )
        return None, result

    result = OptionsValidator(data).validate()
    if not result.is_valid:
        return None, result

    options = ReporterOptions(
        output_dir=data.get("output_dir", DEFAULT_OUTPUT_DIR),
        filename=data.get("filename", DEFAULT_FILENAME),
        title=data.get("title", DEFAULT_TITLE),
        duplicate_policy=DuplicatePolicy(data.get("duplicate_policy", DuplicatePolicy.APPEND_ALL.value)),
    )
    return options, result
