from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# test2json actions, see cmd/test2json in the Go distribution
ACTIONS = ("start", "run", "pause", "cont", "bench", "output", "pass", "fail", "skip")

# Actions that mark the end result of a test or package
CONCLUSIONS = ("pass", "fail", "skip")

CACHED_MARKER = "\t(cached)"
SUBTEST_SEPARATOR = "/"


class EventParseError(Exception):
    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


@dataclass(frozen=True)
class Event:
    action: str
    package: str
    test: str | None = None
    time: datetime | None = None
    elapsed: float | None = None
    output: str | None = None
    is_subtest: bool = field(init=False)
    is_package_level: bool = field(init=False)
    is_conclusive: bool = field(init=False)
    is_cached: bool = field(init=False)

    def __post_init__(self) -> None:
        # Flags only look at this record, never at other events
        object.__setattr__(self, "is_subtest", is_subtest(self.test))
        object.__setattr__(self, "is_package_level", is_package_level(self.test))
        object.__setattr__(self, "is_conclusive", is_conclusive(self.action))
        object.__setattr__(self, "is_cached", is_cached(self.output))


def is_conclusive(action: str) -> bool:
    return action in CONCLUSIONS


def is_package_level(test: str | None) -> bool:
    return test is None


def is_subtest(test: str | None) -> bool:
    # test2json has no better indicator than the name itself
    return test is not None and SUBTEST_SEPARATOR in test


def is_cached(output: str | None) -> bool:
    return output is not None and CACHED_MARKER in output


def split_test_name(name: str) -> list[str]:
    """
    Split a hierarchical test name into its segments.

    ``"TestFoo/Bar/Baz"`` becomes ``["TestFoo", "Bar", "Baz"]``. Aggregation only
    builds two levels, so anything below the first separator stays a single subtest
    keyed by its full name.
    """
    return name.split(SUBTEST_SEPARATOR)


def parent_test_name(name: str) -> str:
    return split_test_name(name)[0]
