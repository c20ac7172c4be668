"""Runner module - request dispatch, redirection and exit codes."""

from .classifier import classify
from .console_runner import ConsoleRunner
from .dispatcher import RunMode, dispatch
from .events import TestEventHandler
from .exit_codes import ExitCode, resolve_exit_code
from .redirect import AutoFlushWriter, OutputRedirector, ScopedOutputs

__all__ = [
    "classify",
    "ConsoleRunner",
    "RunMode",
    "dispatch",
    "TestEventHandler",
    "ExitCode",
    "resolve_exit_code",
    "AutoFlushWriter",
    "OutputRedirector",
    "ScopedOutputs",
]
