"""XML report writer for engine result trees."""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from ..engine.results import TestNode
from .summary import ReportSummary


class XmlResultWriter:
    """Writes a result tree as nested test-suite and test-case elements."""

    def write(self, tree: TestNode, path: Path, summary: Optional[ReportSummary] = None) -> Path:
        """Write the tree to an XML file.

        Args:
            tree: Result tree (run or explore).
            path: Output file path.
            summary: Counts for the ``test-run`` element. Computed if None.

        Returns:
            Path to the written file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        root = self.build(tree, summary)
        ET.indent(root)
        ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
        return path

    def build(self, tree: TestNode, summary: Optional[ReportSummary] = None) -> ET.Element:
        """Build the ``test-run`` element for a tree."""
        summary = summary or ReportSummary.from_tree(tree)
        run = ET.Element("test-run", {
            "testcasecount": str(summary.total),
            "result": summary.overall_result if tree.result else "",
            "total": str(summary.total),
            "passed": str(summary.passed),
            "failed": str(summary.failed),
            "errors": str(summary.errors),
            "inconclusive": str(summary.inconclusive),
            "skipped": str(summary.skipped),
            "duration": f"{summary.duration:.6f}",
        })
        run.append(self._node_element(tree))
        return run

    def _node_element(self, node: TestNode) -> ET.Element:
        tag = "test-case" if node.is_test_case else "test-suite"
        attrs = {"id": node.id, "name": node.name, "fullname": node.full_name}
        if not node.is_test_case:
            attrs["type"] = node.type
        if node.result:
            attrs["result"] = node.result
            attrs["duration"] = f"{node.duration:.6f}"
        if node.label:
            attrs["label"] = node.label

        element = ET.Element(tag, attrs)

        if node.categories:
            cats = ET.SubElement(element, "categories")
            for category in node.categories:
                ET.SubElement(cats, "category", {"name": category})

        if node.outcome in ("failed", "error"):
            failure = ET.SubElement(element, "failure")
            if node.message:
                ET.SubElement(failure, "message").text = node.message
            if node.stack_trace:
                ET.SubElement(failure, "stack-trace").text = node.stack_trace
        elif node.message:
            reason = ET.SubElement(element, "reason")
            ET.SubElement(reason, "message").text = node.message

        if node.output:
            ET.SubElement(element, "output").text = node.output

        for child in node.children:
            element.append(self._node_element(child))

        return element
