"""
Event-log loader.

This module provides the public API for loading and validating
recorded runs from disk or YAML strings.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .models import EventLog
from .parser import EventLogParser
from .validation import EventLogValidator, ValidationResult


def load_event_log(path: str | Path) -> tuple[EventLog | None, ValidationResult]:
    """
    Load and validate an event log from a YAML (or JSON) file.

    Args:
        path: Path to the event log file

    Returns:
        Tuple of (EventLog or None, ValidationResult)
        If validation fails, EventLog will be None.

    Example:
        log, result = load_event_log("runs/nightly.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
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
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    return _validate_and_parse(data, str(path), base_dir=path.parent)


def parse_event_log_yaml(
    yaml_string: str,
    base_dir: str | Path | None = None,
) -> tuple[EventLog | None, ValidationResult]:
    """
    Validate an event log from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string
        base_dir: Directory that relative attachment paths are resolved against

    Returns:
        Tuple of (EventLog or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _validate_and_parse(data, "yaml", base_dir=base_dir)


def _validate_and_parse(
    data: object,
    source: str,
    base_dir: str | Path | None,
) -> tuple[EventLog | None, ValidationResult]:
    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    validator = EventLogValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    return EventLogParser(data, base_dir=base_dir).parse(), result
