"""Turn ``go test -json`` event streams into hierarchical test reports."""

from .events import Event, EventParseError, parse_event, parse_events
from .results import PackageResult, Summary, TestResult, aggregate

__all__ = [
    "Event",
    "EventParseError",
    "PackageResult",
    "Summary",
    "TestResult",
    "aggregate",
    "parse_event",
    "parse_events",
]

__version__ = "0.1.0"
