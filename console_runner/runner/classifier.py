"""Routes an engine result to error or success handling."""

from typing import Callable, TypeVar

from ..engine.results import EngineResult

T = TypeVar("T")


def classify(
    result: EngineResult,
    on_error: Callable[[EngineResult], T],
    on_success: Callable[[EngineResult], T],
) -> T:
    """Call exactly one handler for the result and return its value.

    Test failures are part of a successful result; only engine errors
    take the error path.
    """
    if result.has_errors:
        return on_error(result)
    return on_success(result)
