"""Options module - invocation options and settings file."""

from .schema import (
    DEFAULT_EXPLORE_FORMAT,
    DEFAULT_RESULT_FORMAT,
    UNSET_TIMEOUT,
    InvocationOptions,
    OutputSpecification,
)
from .loader import (
    RunnerConfig,
    apply_defaults,
    load_runner_config,
    resolve_engine_url,
)

__all__ = [
    "DEFAULT_EXPLORE_FORMAT",
    "DEFAULT_RESULT_FORMAT",
    "UNSET_TIMEOUT",
    "InvocationOptions",
    "OutputSpecification",
    "RunnerConfig",
    "apply_defaults",
    "load_runner_config",
    "resolve_engine_url",
]
