"""
Scribe - Markdown Reports for Test Runs

This package listens to a test host's lifecycle events and writes a
diffable Markdown report of the run, with exported screenshots.

Subpackages:
    - events: Host event records and recorded event logs
    - reporting: Outcome accumulation, screenshot export, rendering

Usage:
    from scribe import MarkdownReporter, ReporterOptions, load_event_log

    log, result = load_event_log("runs/nightly.yaml")
    reporter = MarkdownReporter(ReporterOptions(output_dir="md-report"))
    path = reporter.replay(log)
    print(path.read_text())
"""

__version__ = "0.1.0"

# Re-export events for convenience
from .events import (
    # Loader functions
    load_event_log,
    parse_event_log_yaml,
    # Models
    Attachment,
    EventLog,
    FullResult,
    HostError,
    HostStep,
    Location,
    Suite,
    TestCase,
    TestResult,
    # Validation
    ValidationResult,
    ValidationError,
)

# Re-export reporting for convenience
from .reporting import (
    # Models
    DuplicatePolicy,
    RunStatus,
    TestOutcome,
    TestStatus,
    # Reporter
    MarkdownReporter,
    ReporterOptions,
    load_options,
)

__all__ = [
    # Package info
    "__version__",
    # Events - Loader functions
    "load_event_log",
    "parse_event_log_yaml",
    # Events - Models
    "Attachment",
    "EventLog",
    "FullResult",
    "HostError",
    "HostStep",
    "Location",
    "Suite",
    "TestCase",
    "TestResult",
    # Events - Validation
    "ValidationResult",
    "ValidationError",
    # Reporting - Models
    "DuplicatePolicy",
    "RunStatus",
    "TestOutcome",
    "TestStatus",
    # Reporting - Reporter
    "MarkdownReporter",
    "ReporterOptions",
    "load_options",
]
