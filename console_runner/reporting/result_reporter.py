"""Console report of a completed test run."""

import sys
from typing import Optional, TextIO

from ..engine.results import TestNode
from .summary import ReportSummary


class ResultReporter:
    """Prints the run summary, failures and tests not run."""

    def __init__(self, tree: TestNode, out: Optional[TextIO] = None):
        self.tree = tree
        self.out = out or sys.stdout
        self.summary = ReportSummary.from_tree(tree)

    def report_results(self) -> None:
        """Print the full console report."""
        self._print_summary()

        failures = [c for c in self.tree.iter_cases() if c.outcome in ("failed", "error")]
        if failures:
            self._print_failures(failures)

        not_run = [c for c in self.tree.iter_cases() if c.outcome == "skipped"]
        if not_run:
            self._print_not_run(not_run)

    def _print_summary(self) -> None:
        s = self.summary
        self._write("")
        self._write("Test Run Summary")
        self._write(f"    Overall result: {s.overall_result}")
        self._write(
            f"    Test Count: {s.total}, Passed: {s.passed}, Failed: {s.failed}, "
            f"Errors: {s.errors}, Inconclusive: {s.inconclusive}, Skipped: {s.skipped}"
        )
        self._write(f"    Duration: {s.duration:.3f} seconds")
        self._write("")

    def _print_failures(self, cases: list[TestNode]) -> None:
        self._write("Errors and Failures:")
        self._write("")
        for index, case in enumerate(cases, start=1):
            kind = "Error" if case.outcome == "error" else "Failed"
            self._write(f"{index}) {kind} : {case.full_name}")
            if case.message:
                self._write(case.message.rstrip())
            if case.stack_trace:
                self._write(case.stack_trace.rstrip())
            self._write("")

    def _print_not_run(self, cases: list[TestNode]) -> None:
        self._write("Tests Not Run:")
        self._write("")
        for index, case in enumerate(cases, start=1):
            reason = f" : {case.message.strip()}" if case.message else ""
            self._write(f"{index}) {case.label or 'Skipped'} : {case.full_name}{reason}")
        self._write("")

    def _write(self, line: str) -> None:
        print(line, file=self.out)
