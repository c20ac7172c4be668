"""JSON report generator for engine results.

Generates structured JSON reports from run and explore result trees.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..engine.results import TestNode
from .summary import ReportSummary


class JsonReporter:
    """Generates JSON reports from engine result trees."""

    def generate(
        self,
        tree: TestNode,
        summary: Optional[ReportSummary] = None,
    ) -> dict[str, Any]:
        """Generate a JSON report from a run result tree.

        Args:
            tree: Result tree returned by the engine.
            summary: Precomputed summary. Computed from the tree if None.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        summary = summary or ReportSummary.from_tree(tree)

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "name": tree.full_name,
            "status": summary.overall_result.lower(),
            "summary": {
                "total": summary.total,
                "passed": summary.passed,
                "failed": summary.failed,
                "errors": summary.errors,
                "inconclusive": summary.inconclusive,
                "skipped": summary.skipped,
                "errors_and_failures": summary.errors_and_failures,
                "duration": summary.duration,
            },
            "tests": [
                {
                    "name": case.full_name,
                    "status": case.outcome,
                    "label": case.label,
                    "duration": case.duration,
                    "message": case.message,
                    "stack_trace": case.stack_trace,
                }
                for case in tree.iter_cases()
            ],
            "tree": tree.to_dict(),
        }

    def generate_test_list(self, tree: TestNode) -> dict[str, Any]:
        """Generate a JSON report from an explore result tree.

        Args:
            tree: Explored test tree.

        Returns:
            Report dictionary listing the discovered tests.
        """
        cases = list(tree.iter_cases())
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "name": tree.full_name,
            "test_count": len(cases),
            "tests": [
                {"name": case.full_name, "categories": list(case.categories)}
                for case in cases
            ],
            "tree": tree.to_dict(),
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path
