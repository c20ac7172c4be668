"""Engine module - engine boundary, result model and HTTP client."""

from .http_engine import HttpEngine
from .protocol import TestEngine, TestEventSink
from .results import (
    EngineError,
    EngineResult,
    ResultKind,
    TestEvent,
    TestNode,
    parse_engine_result,
)

__all__ = [
    "HttpEngine",
    "TestEngine",
    "TestEventSink",
    "EngineError",
    "EngineResult",
    "ResultKind",
    "TestEvent",
    "TestNode",
    "parse_engine_result",
]
