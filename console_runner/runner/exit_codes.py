"""Process exit codes of the console runner."""

from enum import IntEnum
from typing import Optional

from ..engine.results import EngineResult
from ..reporting.summary import ReportSummary
from .dispatcher import RunMode


class ExitCode(IntEnum):
    OK = 0
    INVALID_ARG = -1
    FILE_NOT_FOUND = -2
    FIXTURE_NOT_FOUND = -3
    UNEXPECTED_ERROR = -100


def resolve_exit_code(
    mode: RunMode,
    result: EngineResult,
    summary: Optional[ReportSummary] = None,
) -> int:
    """Map an engine outcome to the process exit code.

    Args:
        mode: Mode the engine was dispatched in.
        result: Engine result.
        summary: Run summary. Required for a successful RUN.

    Returns:
        UNEXPECTED_ERROR for engine errors, OK for explore, otherwise the
        number of failed and erroring test cases.
    """
    if result.has_errors:
        return ExitCode.UNEXPECTED_ERROR

    if mode is RunMode.EXPLORE:
        return ExitCode.OK

    if summary is None:
        raise ValueError("A report summary is required to resolve a run exit code.")

    return summary.errors_and_failures
