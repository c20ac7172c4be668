"""Engine result models.

An engine call ends in exactly one of two shapes: an error report, or a
result tree describing the tests that were explored or run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


class ResultKind(str, Enum):
    """Discriminant of an EngineResult."""
    SUCCESS = "success"
    ERROR = "error"


# Failed results carrying one of these labels count as errors, not failures.
ERROR_LABELS = {"error", "invalid", "cancelled"}


@dataclass
class TestNode:
    """A node of the engine's result tree."""
    name: str
    full_name: str = ""
    type: str = "TestCase"
    id: str = ""
    result: Optional[str] = None
    label: Optional[str] = None
    duration: float = 0.0
    message: Optional[str] = None
    stack_trace: Optional[str] = None
    output: Optional[str] = None
    categories: list[str] = field(default_factory=list)
    children: list["TestNode"] = field(default_factory=list)

    __test__ = False

    def __post_init__(self):
        if not self.full_name:
            self.full_name = self.name

    @property
    def is_test_case(self) -> bool:
        return self.type == "TestCase"

    @property
    def outcome(self) -> Optional[str]:
        """Normalized outcome: passed, failed, error, inconclusive, skipped or None."""
        if not self.result:
            return None
        result = self.result.lower()
        if result == "failed":
            if self.label and self.label.lower() in ERROR_LABELS:
                return "error"
            return "failed"
        if result in ("passed", "inconclusive", "skipped"):
            return result
        return None

    def iter_cases(self) -> Iterator["TestNode"]:
        """Yield every test case in this subtree, depth first."""
        if self.is_test_case:
            yield self
        for child in self.children:
            yield from child.iter_cases()

    def to_dict(self) -> dict[str, Any]:
        """Convert node and its children to a dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "fullname": self.full_name,
            "type": self.type,
        }
        for key, value in (
            ("result", self.result),
            ("label", self.label),
            ("message", self.message),
            ("stack_trace", self.stack_trace),
            ("output", self.output),
        ):
            if value is not None:
                data[key] = value
        if self.result is not None:
            data["duration"] = self.duration
        if self.categories:
            data["categories"] = list(self.categories)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TestNode":
        """Parse a node (and its children) from engine JSON.

        Raises:
            ValueError: If the node is not a mapping or has no name.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Result node must be a mapping, got {type(data).__name__}")
        if not data.get("name"):
            raise ValueError("Result node is missing 'name'")

        children = data.get("children", [])
        if not isinstance(children, list):
            raise ValueError(f"'children' of '{data['name']}' must be a list")

        return cls(
            name=str(data["name"]),
            full_name=str(data.get("fullname") or data.get("full_name") or ""),
            type=str(data.get("type", "TestCase")),
            id=str(data.get("id", "")),
            result=data.get("result"),
            label=data.get("label"),
            duration=float(data.get("duration") or 0.0),
            message=data.get("message"),
            stack_trace=data.get("stack_trace"),
            output=data.get("output"),
            categories=[str(c) for c in data.get("categories", [])],
            children=[cls.from_dict(c) for c in children],
        )


@dataclass(frozen=True)
class EngineError:
    """One error reported by the engine."""
    message: Optional[str]
    stack_trace: Optional[str] = None


@dataclass(frozen=True)
class EngineResult:
    """Tagged result of an engine call.

    Use ``EngineResult.success`` or ``EngineResult.failure`` to build one.
    Check ``has_errors`` before touching ``tree``.
    """
    kind: ResultKind
    errors: tuple[EngineError, ...] = ()
    _tree: Optional[TestNode] = None

    def __post_init__(self):
        if self.kind is ResultKind.ERROR:
            if not self.errors or self._tree is not None:
                raise ValueError("An error result needs errors and no result tree.")
        elif self.kind is ResultKind.SUCCESS:
            if self.errors or self._tree is None:
                raise ValueError("A success result needs a result tree and no errors.")
        else:
            raise ValueError(f"Unknown result kind: {self.kind!r}")

    @classmethod
    def success(cls, tree: TestNode) -> "EngineResult":
        return cls(kind=ResultKind.SUCCESS, _tree=tree)

    @classmethod
    def failure(cls, errors: list[EngineError]) -> "EngineResult":
        return cls(kind=ResultKind.ERROR, errors=tuple(errors))

    @property
    def has_errors(self) -> bool:
        return self.kind is ResultKind.ERROR

    @property
    def tree(self) -> TestNode:
        """Result tree of a successful call.

        Raises:
            RuntimeError: If the engine reported errors.
        """
        if self._tree is None:
            raise RuntimeError("Engine reported errors; there is no result tree.")
        return self._tree


def parse_engine_result(data: Any) -> EngineResult:
    """Parse an engine result payload.

    Expected JSON format, one of:
    {"errors": [{"message": "...", "stack_trace": "..."}]}
    {"result": { ...result tree... }}

    Raises:
        ValueError: If the payload carries neither errors nor a result.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Engine payload must be a mapping, got {type(data).__name__}")

    errors_data = data.get("errors")
    if errors_data:
        errors = []
        for e in errors_data:
            if isinstance(e, dict):
                errors.append(EngineError(
                    message=e.get("message"),
                    stack_trace=e.get("stack_trace"),
                ))
            else:
                errors.append(EngineError(message=str(e)))
        return EngineResult.failure(errors)

    if data.get("result") is None:
        raise ValueError("Engine payload has neither 'errors' nor 'result'")

    return EngineResult.success(TestNode.from_dict(data["result"]))


@dataclass
class TestEvent:
    """A notification streamed by the engine during a run."""
    kind: str  # "start-test", "test-case", "test-suite" or "test-output"
    full_name: str = ""
    result: Optional[str] = None
    label: Optional[str] = None
    text: Optional[str] = None
    stream: str = "out"  # "out" or "error", for test-output

    __test__ = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TestEvent":
        return cls(
            kind=str(data.get("kind", "")),
            full_name=str(data.get("fullname") or data.get("full_name") or ""),
            result=data.get("result"),
            label=data.get("label"),
            text=data.get("text"),
            stream=str(data.get("stream", "out")),
        )
