import json
import math
import re
from datetime import datetime
from typing import Any, Mapping

from gotestreport.logging import get_logger

from .types import Event, EventParseError

logger = get_logger(__name__)

# Go emits nanoseconds, datetime keeps microseconds
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_events(stdout: str) -> list[Event]:
    """
    Convert raw ``go test -json`` output into events, keeping line order.

    Lines that cannot be turned into an event are logged and skipped.
    """
    events: list[Event] = []

    for line in stdout.split("\n"):
        if len(line) == 0:
            continue

        try:
            events.append(parse_event(line))
        except EventParseError as exc:
            logger.debug("unable to parse line: %s", exc)
            continue

    return events


def parse_event(line: str) -> Event:
    try:
        raw = json.loads(line)
    except json.JSONDecodeError as exc:
        raise EventParseError(line, "invalid JSON") from exc

    if not isinstance(raw, Mapping):
        raise EventParseError(line, f"expected an object, got {type(raw).__name__}")

    action = raw.get("Action")
    if not isinstance(action, str):
        raise EventParseError(line, "'Action' must be a string")

    package = raw.get("Package")
    if not isinstance(package, str) or len(package) < 1:
        raise EventParseError(line, "'Package' must be a non-empty string")

    test = _optional_str(raw, "Test", line)
    output = _optional_str(raw, "Output", line)
    elapsed = _parse_elapsed(raw, line)
    time = _parse_time(raw.get("Time"))

    return Event(
        action=action,
        package=package,
        test=test,
        time=time,
        elapsed=elapsed,
        output=output,
    )


def _optional_str(raw: Mapping[str, Any], key: str, line: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None

    if not isinstance(value, str):
        raise EventParseError(line, f"'{key}' must be a string")

    return value


def _parse_elapsed(raw: Mapping[str, Any], line: str) -> float | None:
    value = raw.get("Elapsed")
    if value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EventParseError(line, "'Elapsed' must be a number")

    if not math.isfinite(value):
        raise EventParseError(line, "'Elapsed' must be finite")

    if value < 0:
        raise EventParseError(line, "'Elapsed' can't be negative")

    return float(value)


def _parse_time(value: Any) -> datetime | None:
    if value is None:
        return None

    if not isinstance(value, str):
        logger.debug("ignoring non-string Time: %r", value)
        return None

    try:
        return datetime.fromisoformat(_FRACTION_RE.sub(r"\1", value))
    except ValueError:
        logger.debug("ignoring unparsable Time: %r", value)
        return None
