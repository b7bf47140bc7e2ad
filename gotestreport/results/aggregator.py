from __future__ import annotations

from typing import Iterable, Sequence

from gotestreport.events import Event, parent_test_name
from gotestreport.logging import get_logger

from .types import PackageResult, Summary, TestResult, empty_conclusions

logger = get_logger(__name__)


def aggregate(events: Sequence[Event]) -> Summary:
    """
    Fold a flat event stream into one result per package plus global totals.

    Packages are ordered by name. Each package must report exactly one
    package-level conclusion; when it reports several, the last one in the
    stream wins.
    """
    verdicts: dict[str, Event] = {}
    for event in events:
        if not (event.is_conclusive and event.is_package_level):
            continue

        if event.package in verdicts:
            logger.warning(
                "package %s reported more than one conclusion (%s, then %s), "
                "keeping the last",
                event.package,
                verdicts[event.package].action,
                event.action,
            )
        verdicts[event.package] = event

    results: list[PackageResult] = []
    for package in sorted(verdicts):
        results.append(build_package_result(verdicts[package], events))

    return Summary(packages=results, totals=sum_conclusions(results))


def build_package_result(
    package_event: Event, events: Iterable[Event]
) -> PackageResult:
    package = package_event.package
    retained: list[Event] = []
    cached = False

    for event in events:
        if event.package != package:
            continue
        if event.is_cached:
            cached = True
        if not event.is_package_level:
            retained.append(event)

    result = PackageResult(package_event, retained, cached=cached)

    for event in retained:
        if not event.is_conclusive:
            continue

        if event.test is None:
            raise AssertionError("Unreachable")

        conclusion = event.action
        result.conclusions[conclusion] += 1

        if event.is_subtest:
            parent_name = parent_test_name(event.test)
            parent = result.tests.setdefault(parent_name, TestResult())
            parent.subtests[event.test] = TestResult(conclusion=conclusion)
        else:
            result.tests.setdefault(event.test, TestResult()).conclusion = conclusion

    for name, test in result.tests.items():
        if test.conclusion is None:
            logger.debug(
                "%s: test %s has subtests but no conclusion of its own", package, name
            )

    return result


def sum_conclusions(results: Iterable[PackageResult]) -> dict[str, int]:
    totals = empty_conclusions()
    for result in results:
        for conclusion, count in result.conclusions.items():
            totals[conclusion] += count
    return totals


def sorted_tests(result: PackageResult) -> list[tuple[str, TestResult]]:
    return sorted(result.tests.items())


def sorted_subtests(test: TestResult) -> list[tuple[str, TestResult]]:
    return sorted(test.subtests.items())


def effective_conclusion(test: TestResult) -> str | None:
    """
    Conclusion to display for a test.

    A parent that never reported its own conclusion takes it from its subtests:
    ``fail`` if any failed, ``skip`` if all were skipped, ``pass`` otherwise.
    """
    if test.conclusion is not None:
        return test.conclusion

    children = [sub.conclusion for sub in test.subtests.values()]
    if not children:
        return None
    if "fail" in children:
        return "fail"
    if all(c == "skip" for c in children):
        return "skip"
    return "pass"
