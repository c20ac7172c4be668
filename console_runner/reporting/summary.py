"""Aggregate counts for a test run."""

from dataclasses import dataclass

from ..engine.results import TestNode


@dataclass(frozen=True)
class ReportSummary:
    """Pass/fail counts derived from one result tree."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    inconclusive: int = 0
    skipped: int = 0
    duration: float = 0.0

    @property
    def errors_and_failures(self) -> int:
        """Number of cases that failed or errored. Used as the exit code."""
        return self.failed + self.errors

    @property
    def overall_result(self) -> str:
        if self.errors_and_failures:
            return "Failed"
        if self.inconclusive and not self.passed:
            return "Inconclusive"
        return "Passed"

    @classmethod
    def from_tree(cls, tree: TestNode) -> "ReportSummary":
        """Count test cases of a result tree by outcome."""
        counts = {"passed": 0, "failed": 0, "error": 0, "inconclusive": 0, "skipped": 0}
        total = 0

        for case in tree.iter_cases():
            total += 1
            outcome = case.outcome
            if outcome in counts:
                counts[outcome] += 1

        return cls(
            total=total,
            passed=counts["passed"],
            failed=counts["failed"],
            errors=counts["error"],
            inconclusive=counts["inconclusive"],
            skipped=counts["skipped"],
            duration=tree.duration,
        )
