"""Request builder - turns invocation options into engine input.

Both builders are pure: same options in, equal request and filter out.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..options.schema import InvocationOptions
from .filter import TestFilter


class RequestKind(str, Enum):
    """Single-file and multi-file runs are handled differently by the engine."""
    SINGLE_FILE = "single"
    MULTI_FILE = "multi"


@dataclass(frozen=True)
class PackageSettings:
    """Typed engine settings. None means "let the engine decide"."""
    process_model: Optional[str] = None
    domain_usage: Optional[str] = None
    runtime_framework: Optional[str] = None
    default_timeout: Optional[int] = None
    internal_trace_level: Optional[str] = None
    active_config: Optional[str] = None
    work_directory: Optional[str] = None
    stop_on_error: Optional[bool] = None

    def to_engine_settings(self) -> dict[str, Any]:
        """Resolve to the sparse settings map understood by the engine.

        Only settings that were explicitly given appear as keys.
        """
        mapping = {
            "ProcessModel": self.process_model,
            "DomainUsage": self.domain_usage,
            "RuntimeFramework": self.runtime_framework,
            "DefaultTimeout": self.default_timeout,
            "InternalTraceLevel": self.internal_trace_level,
            "ActiveConfig": self.active_config,
            "WorkDirectory": self.work_directory,
            "StopOnError": self.stop_on_error,
        }
        return {k: v for k, v in mapping.items() if v is not None}


@dataclass(frozen=True)
class ExecutionRequest:
    """Self-contained unit of work handed to the engine."""
    input_files: tuple[str, ...]
    settings: PackageSettings = field(default_factory=PackageSettings)

    @property
    def kind(self) -> RequestKind:
        if len(self.input_files) == 1:
            return RequestKind.SINGLE_FILE
        return RequestKind.MULTI_FILE

    def to_dict(self) -> dict[str, Any]:
        """Convert request to dictionary for the engine.

        A single-file request names its file directly; a multi-file request
        carries one sub-package per file.
        """
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.kind is RequestKind.SINGLE_FILE:
            data["full_name"] = self.input_files[0]
        else:
            data["sub_packages"] = [{"full_name": f} for f in self.input_files]
        data["settings"] = self.settings.to_engine_settings()
        return data


def build_request(options: InvocationOptions) -> ExecutionRequest:
    """Build an execution request from invocation options.

    Args:
        options: Parsed invocation options.

    Returns:
        ExecutionRequest with only the explicitly given settings.

    Raises:
        ValueError: If no input files were given.
    """
    if not options.input_files:
        raise ValueError("At least one input file is required to build a request.")

    settings = PackageSettings(
        process_model=options.process_model,
        domain_usage=options.domain_usage,
        runtime_framework=options.framework,
        default_timeout=options.default_timeout if options.default_timeout >= 0 else None,
        internal_trace_level=options.trace_level,
        active_config=options.active_config,
        work_directory=options.work_directory,
        stop_on_error=True if options.stop_on_error else None,
    )

    return ExecutionRequest(input_files=tuple(options.input_files), settings=settings)


def build_filter(options: InvocationOptions) -> TestFilter:
    """Build the test filter from invocation options.

    Only one include and one exclude expression are supported per invocation.
    """
    tests = tuple(name for name in options.test_list if name)

    # TODO: accept several --include/--exclude expressions once the options
    # model carries lists for them.
    include = (options.include,) if options.include else ()
    exclude = (options.exclude,) if options.exclude else ()

    return TestFilter(tests=tests, include=include, exclude=exclude)
