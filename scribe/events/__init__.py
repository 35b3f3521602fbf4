"""
Host Events for Test Runs

This package provides the typed records a test-execution host delivers
to the reporter, plus loading of recorded runs (event logs) so a run
can be replayed without the host.

Usage:
    from scribe.events import load_event_log

    log, result = load_event_log("runs/nightly.yaml")
    if not result.is_valid:
        print(result)
"""

# Public API
from .loader import load_event_log, parse_event_log_yaml

# Models (for type hints and isinstance checks)
from .models import (
    Attachment,
    EventLog,
    FullResult,
    HostError,
    HostStep,
    ImageKind,
    Location,
    Suite,
    TestCase,
    TestEndEvent,
    TestResult,
)

# Validation
from .validation import EventLogValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_event_log",
    "parse_event_log_yaml",
    # Models
    "Attachment",
    "EventLog",
    "FullResult",
    "HostError",
    "HostStep",
    "ImageKind",
    "Location",
    "Suite",
    "TestCase",
    "TestEndEvent",
    "TestResult",
    # Validation
    "EventLogValidator",
    "ValidationError",
    "ValidationResult",
]
