"""Test filter for selecting which tests the engine explores or runs.

A filter combines an explicit test name list with include and exclude
category expressions. An empty filter matches every test.

Category expression grammar:
    ``A,B``   A or B
    ``A+B``   A and B (binds tighter than ``,``)
    ``-A``    not A
"""

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class TestFilter:
    """Composed test predicate."""
    tests: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    __test__ = False

    @property
    def is_empty(self) -> bool:
        return not (self.tests or self.include or self.exclude)

    def matches(self, full_name: str, categories: Iterable[str] = ()) -> bool:
        """Check whether a test is selected by this filter.

        Args:
            full_name: Fully qualified test name.
            categories: Categories attached to the test.

        Returns:
            True if the test is selected.
        """
        if self.is_empty:
            return True

        cats = {c.strip() for c in categories}

        if self.tests and not any(_name_matches(full_name, t) for t in self.tests):
            return False

        if self.include and not any(category_matches(expr, cats) for expr in self.include):
            return False

        if any(category_matches(expr, cats) for expr in self.exclude):
            return False

        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert filter to dictionary for the engine."""
        return {
            "tests": list(self.tests),
            "include": list(self.include),
            "exclude": list(self.exclude),
        }


def category_matches(expression: str, categories: set[str]) -> bool:
    """Evaluate a category expression against a set of categories."""
    for alternative in expression.split(","):
        terms = [t.strip() for t in alternative.split("+") if t.strip()]
        if terms and all(_term_matches(term, categories) for term in terms):
            return True
    return False


def _term_matches(term: str, categories: set[str]) -> bool:
    if term.startswith("-"):
        return term[1:].strip() not in categories
    return term in categories


def _name_matches(full_name: str, selected: str) -> bool:
    """A selected name picks the test itself and everything nested under it."""
    return full_name == selected or full_name.startswith(selected + ".")
