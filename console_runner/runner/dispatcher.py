"""Dispatches an execution request to the engine in explore or run mode."""

from enum import Enum
from typing import Optional

from ..engine.protocol import TestEngine, TestEventSink
from ..engine.results import EngineResult
from ..request.builder import ExecutionRequest
from ..request.filter import TestFilter


class RunMode(str, Enum):
    """What the engine is asked to do."""
    EXPLORE = "explore"
    RUN = "run"


def dispatch(
    engine: TestEngine,
    request: ExecutionRequest,
    test_filter: TestFilter,
    mode: RunMode,
    event_sink: Optional[TestEventSink] = None,
) -> EngineResult:
    """Invoke the engine once and return its result.

    There are no retries. Exceptions raised by the engine propagate.

    Args:
        engine: Test engine to call.
        request: Execution request.
        test_filter: Test selection.
        mode: EXPLORE enumerates tests, RUN executes them.
        event_sink: Receives run events. Required for RUN.

    Returns:
        EngineResult of the call.

    Raises:
        ValueError: If RUN is requested without an event sink.
        TypeError: If the engine returns something other than an EngineResult.
    """
    if mode is RunMode.EXPLORE:
        result = engine.explore(request, test_filter)
    elif mode is RunMode.RUN:
        if event_sink is None:
            raise ValueError("An event sink is required to run tests.")
        result = engine.run(request, event_sink, test_filter)
    else:
        raise ValueError(f"Unknown run mode: {mode!r}")

    if not isinstance(result, EngineResult):
        raise TypeError(f"Engine returned {type(result).__name__}, expected EngineResult")

    return result
