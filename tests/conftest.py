import sys
from typing import Optional

import pytest

from console_runner.engine.results import EngineError, EngineResult, TestEvent, TestNode
from console_runner.options.schema import InvocationOptions


# -------------------------------
# Helpers
# -------------------------------
def make_case(name: str, result: Optional[str] = None, label: Optional[str] = None,
              **kwargs) -> TestNode:
    return TestNode(name=name.split(".")[-1], full_name=name, type="TestCase",
                    result=result, label=label, **kwargs)


def make_run_tree(passed: int = 0, failed: int = 0, errors: int = 0,
                  skipped: int = 0, inconclusive: int = 0) -> TestNode:
    cases = []
    for i in range(passed):
        cases.append(make_case(f"Lib.Tests.Passing{i}", "Passed", duration=0.01))
    for i in range(failed):
        cases.append(make_case(f"Lib.Tests.Failing{i}", "Failed",
                               message=f"Expected 1 but was {i}", stack_trace="at Lib.Tests"))
    for i in range(errors):
        cases.append(make_case(f"Lib.Tests.Erroring{i}", "Failed", label="Error",
                               message="NullReferenceException"))
    for i in range(skipped):
        cases.append(make_case(f"Lib.Tests.Skipped{i}", "Skipped", label="Ignored",
                               message="not ready"))
    for i in range(inconclusive):
        cases.append(make_case(f"Lib.Tests.Maybe{i}", "Inconclusive"))

    fixture = TestNode(name="Tests", full_name="Lib.Tests", type="TestFixture",
                       result="Failed" if failed or errors else "Passed", children=cases)
    return TestNode(name="lib.dll", full_name="lib.dll", type="Assembly",
                    result=fixture.result, duration=1.5, children=[fixture])


def make_explore_tree(*names: str) -> TestNode:
    cases = [make_case(n) for n in names]
    return TestNode(name="lib.dll", full_name="lib.dll", type="Assembly", children=[
        TestNode(name="Tests", full_name="Lib.Tests", type="TestFixture", children=cases),
    ])


class FakeEngine:
    """In-memory engine recording every call."""

    def __init__(self, explore_result: Optional[EngineResult] = None,
                 run_result: Optional[EngineResult] = None,
                 events: Optional[list[TestEvent]] = None,
                 raise_on_run: Optional[Exception] = None):
        self.explore_result = explore_result
        self.run_result = run_result
        self.events = events or []
        self.raise_on_run = raise_on_run
        self.calls: list[tuple] = []

    def explore(self, request, test_filter):
        self.calls.append(("explore", request, test_filter))
        return self.explore_result

    def run(self, request, event_sink, test_filter):
        self.calls.append(("run", request, test_filter, event_sink))
        print("engine stdout during run")
        print("engine stderr during run", file=sys.stderr)
        for event in self.events:
            event_sink.on_test_event(event)
        if self.raise_on_run is not None:
            raise self.raise_on_run
        return self.run_result


@pytest.fixture
def sample_options(tmp_path):
    return InvocationOptions(input_files=("lib.dll",), work_directory=str(tmp_path))


@pytest.fixture
def load_failure():
    return EngineResult.failure([
        EngineError(message="bad assembly", stack_trace="at Loader.Load()"),
    ])
