"""Event sink that echoes run events to the console streams."""

from typing import TextIO

from ..engine.results import TestEvent


class TestEventHandler:
    """Receives engine events during a run.

    Test output goes to the out or error stream it was produced on. With
    ``labels`` each test is announced before its output.
    """

    __test__ = False

    def __init__(self, out: TextIO, err: TextIO, labels: bool = False):
        self.out = out
        self.err = err
        self.labels = labels

    def on_test_event(self, event: TestEvent) -> None:
        if event.kind == "start-test" and self.labels:
            print(f"***** {event.full_name}", file=self.out)

        elif event.kind == "test-output" and event.text:
            stream = self.err if event.stream == "error" else self.out
            stream.write(event.text)
            if not event.text.endswith("\n"):
                stream.write("\n")
