from .parser import parse_event, parse_events
from .types import (
    ACTIONS,
    CONCLUSIONS,
    Event,
    EventParseError,
    parent_test_name,
    split_test_name,
)

__all__ = [
    "ACTIONS",
    "CONCLUSIONS",
    "Event",
    "EventParseError",
    "parent_test_name",
    "parse_event",
    "parse_events",
    "split_test_name",
]
