from .aggregator import (
    aggregate,
    build_package_result,
    effective_conclusion,
    sorted_subtests,
    sorted_tests,
    sum_conclusions,
)
from .types import PackageResult, Summary, TestResult, empty_conclusions

__all__ = [
    "PackageResult",
    "Summary",
    "TestResult",
    "aggregate",
    "build_package_result",
    "effective_conclusion",
    "empty_conclusions",
    "sorted_subtests",
    "sorted_tests",
    "sum_conclusions",
]
