"""Engine boundary consumed by the console runner."""

from typing import Protocol

from ..request.builder import ExecutionRequest
from ..request.filter import TestFilter
from .results import EngineResult, TestEvent


class TestEventSink(Protocol):
    """Receives ordered notifications while tests run."""

    def on_test_event(self, event: TestEvent) -> None:
        ...


class TestEngine(Protocol):
    """External service that discovers and executes tests."""

    def explore(self, request: ExecutionRequest, test_filter: TestFilter) -> EngineResult:
        """Enumerate matching tests without executing any test code."""
        ...

    def run(
        self,
        request: ExecutionRequest,
        event_sink: TestEventSink,
        test_filter: TestFilter,
    ) -> EngineResult:
        """Execute matching tests, streaming events to the sink."""
        ...
