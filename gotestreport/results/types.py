from __future__ import annotations

from dataclasses import dataclass, field

from gotestreport.events import CONCLUSIONS, Event


def empty_conclusions() -> dict[str, int]:
    return {conclusion: 0 for conclusion in CONCLUSIONS}


@dataclass
class TestResult:
    __test__ = False

    conclusion: str | None = None
    subtests: dict[str, TestResult] = field(default_factory=dict)


@dataclass
class PackageResult:
    package_event: Event
    events: list[Event]
    tests: dict[str, TestResult] = field(default_factory=dict)
    conclusions: dict[str, int] = field(default_factory=empty_conclusions)
    cached: bool = False

    @property
    def package(self) -> str:
        return self.package_event.package

    def test_count(self) -> int:
        return sum(self.conclusions.values())

    def has_tests(self) -> bool:
        return self.test_count() != 0

    def only_successful_tests(self) -> bool:
        return self.conclusions["skip"] == 0 and self.conclusions["fail"] == 0

    def output(self) -> str:
        return "".join(e.output for e in self.events if e.output is not None)


@dataclass
class Summary:
    packages: list[PackageResult]
    totals: dict[str, int]

    def __iter__(self):
        return iter(self.packages)

    def __len__(self):
        return len(self.packages)

    def test_count(self) -> int:
        return sum(self.totals.values())

    def failed_packages(self) -> list[str]:
        return [r.package for r in self.packages if r.package_event.action == "fail"]
