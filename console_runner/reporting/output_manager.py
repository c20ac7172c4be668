"""Writes result and test files named by output specifications.

Formats:
    json   - JSON report (see JsonReporter)
    xml    - nested test-suite / test-case XML
    cases  - one test case name per line

Transforms narrow the tree before it is written:
    failures - only failed or erroring cases
    skipped  - only skipped cases
"""

import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from ..engine.results import TestNode
from ..errors import OutputWriteError
from ..options.schema import OutputSpecification
from .case_writer import TestCaseOutputWriter
from .json_reporter import JsonReporter
from .summary import ReportSummary
from .xml_writer import XmlResultWriter


RESULT_FORMATS = {"json", "xml", "cases"}
TEST_FORMATS = {"json", "xml", "cases"}

TRANSFORMS: dict[str, Callable[[TestNode], bool]] = {
    "failures": lambda case: case.outcome in ("failed", "error"),
    "skipped": lambda case: case.outcome == "skipped",
}


class OutputManager:
    """Serializes one result tree to any number of destinations."""

    def __init__(
        self,
        tree: TestNode,
        work_directory: Union[str, Path],
        out: Optional[TextIO] = None,
    ):
        """Initialize output manager.

        Args:
            tree: Result tree returned by the engine.
            work_directory: Relative output paths are resolved against this.
            out: Stream for "saved as" messages. Default: sys.stdout.
        """
        self.tree = tree
        self.work_directory = Path(work_directory)
        self.out = out or sys.stdout

    def write_result_file(self, spec: OutputSpecification) -> Path:
        """Write the run result tree for one specification.

        Raises:
            OutputWriteError: If the format or transform is unknown or the
                file cannot be written.
        """
        return self._write(spec, RESULT_FORMATS, is_result=True)

    def write_test_file(self, spec: OutputSpecification) -> Path:
        """Write the explored test tree for one specification.

        Raises:
            OutputWriteError: If the format or transform is unknown or the
                file cannot be written.
        """
        return self._write(spec, TEST_FORMATS, is_result=False)

    def _write(self, spec: OutputSpecification, formats: set[str], is_result: bool) -> Path:
        if spec.format not in formats:
            raise OutputWriteError(
                f"Unknown output format '{spec.format}'. "
                f"Must be one of: {', '.join(sorted(formats))}"
            )

        tree = self._transformed(spec.transform)
        path = self.work_directory / spec.output_path

        try:
            if spec.format == "json":
                reporter = JsonReporter()
                if is_result:
                    report = reporter.generate(tree, ReportSummary.from_tree(tree))
                else:
                    report = reporter.generate_test_list(tree)
                reporter.save(report, path)

            elif spec.format == "xml":
                XmlResultWriter().write(tree, path)

            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "w", encoding="utf-8") as f:
                    TestCaseOutputWriter().write(tree, f)

        except (OSError, ValueError, TypeError) as e:
            if path.is_file():
                path.unlink()
            raise OutputWriteError(f"Cannot write {path}: {e}") from e

        kind = "Results" if is_result else "Tests"
        print(f"{kind} ({spec.format}) saved as {path}", file=self.out)
        return path

    def _transformed(self, transform: Optional[str]) -> TestNode:
        if not transform:
            return self.tree

        keep = TRANSFORMS.get(transform)
        if keep is None:
            raise OutputWriteError(
                f"Unknown transform '{transform}'. "
                f"Must be one of: {', '.join(sorted(TRANSFORMS))}"
            )

        pruned = _prune(self.tree, keep)
        if pruned is not None:
            return pruned
        if self.tree.is_test_case:
            # A lone case that was filtered out leaves an empty suite.
            return TestNode(name=self.tree.name, full_name=self.tree.full_name,
                            type="TestSuite", id=self.tree.id)
        return replace(self.tree, children=[])


def _prune(node: TestNode, keep: Callable[[TestNode], bool]) -> Optional[TestNode]:
    """Copy of the subtree holding only kept cases and the suites above them."""
    if node.is_test_case:
        return node if keep(node) else None

    children = [c for c in (_prune(child, keep) for child in node.children) if c is not None]
    if not children:
        return None
    return replace(node, children=children)
