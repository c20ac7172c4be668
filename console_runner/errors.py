"""Error taxonomy for the console runner.

Test failures are not errors: they are counted in the report summary.
"""


class ConsoleRunnerError(Exception):
    """Base class for console runner failures."""


class ConfigError(ConsoleRunnerError):
    """Raised when a settings file is malformed."""


class EngineConnectionError(ConsoleRunnerError):
    """Raised when the test engine cannot be reached."""


class OutputWriteError(ConsoleRunnerError):
    """Raised when a report destination cannot be written."""
