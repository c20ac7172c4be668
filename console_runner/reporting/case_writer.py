"""Plain text listing of test case names."""

from typing import TextIO

from ..engine.results import TestNode


class TestCaseOutputWriter:
    """Writes one fully qualified test case name per line."""

    __test__ = False

    def write(self, tree: TestNode, stream: TextIO) -> int:
        """Write every test case of the tree to the stream.

        Returns:
            Number of test cases written.
        """
        count = 0
        for case in tree.iter_cases():
            stream.write(case.full_name + "\n")
            count += 1
        return count
