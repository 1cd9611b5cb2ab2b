"""Models for snippet test results."""

import functools
from collections.abc import Iterable
from dataclasses import dataclass, fields


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Tally of snippet test outcomes.

    Results are combined with ``reduce``, which adds the counts slot by slot.
    The same law is used for a single docstring and for a whole tree, so
    results can be folded in any order or grouping.

    ```python test
    from docsnippet.models.result import TestResult

    first = TestResult(passed=1, failed=2, skipped=3)
    second = TestResult(passed=10, failed=20, skipped=30)
    assert first.reduce(second) == TestResult(passed=11, failed=22, skipped=33)
    ```
    """

    __test__ = False

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    errored: int = 0

    def __post_init__(self) -> None:
        for slot in fields(self):
            if getattr(self, slot.name) < 0:
                raise ValueError(f"{slot.name} must not be negative")

    @property
    def total(self) -> int:
        """Number of snippets accounted for in this result."""
        return self.passed + self.failed + self.skipped + self.errored

    @property
    def successful(self) -> bool:
        """True when nothing failed or errored."""
        return self.failed == 0 and self.errored == 0

    def reduce(self, other: "TestResult | None") -> "TestResult":
        """Combine two results by adding their counts."""
        if other is None or other == ZERO:
            return self
        if self == ZERO:
            return other
        return TestResult(
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
            skipped=self.skipped + other.skipped,
            errored=self.errored + other.errored,
        )

    @classmethod
    def fold(cls, results: Iterable["TestResult"]) -> "TestResult":
        """Reduce any number of results, starting from ``ZERO``."""
        return functools.reduce(cls.reduce, results, ZERO)


ZERO = TestResult()
PASS = TestResult(passed=1)
FAIL = TestResult(failed=1)
SKIP = TestResult(skipped=1)
ERROR = TestResult(errored=1)
