"""Invocation option models for the console runner.

Defines the immutable option values produced by the command line and
the output specifications that name report files.
"""

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_RESULT_FORMAT = "json"
DEFAULT_EXPLORE_FORMAT = "cases"

# Sentinel for "no default timeout requested"
UNSET_TIMEOUT = -1


@dataclass(frozen=True)
class OutputSpecification:
    """A single report destination.

    Written on the command line as ``PATH[;format=FMT][;transform=NAME]``.
    """
    output_path: str
    format: str = DEFAULT_RESULT_FORMAT
    transform: Optional[str] = None

    @classmethod
    def parse(
        cls, text: str, default_format: str = DEFAULT_RESULT_FORMAT
    ) -> "OutputSpecification":
        """Parse an output specification string.

        Args:
            text: Specification such as ``TestResult.xml;format=xml``.
            default_format: Format used when none is given.

        Returns:
            Parsed OutputSpecification.

        Raises:
            ValueError: If the path is empty or an option is malformed.
        """
        parts = [p.strip() for p in text.split(";")]
        output_path = parts[0]
        if not output_path:
            raise ValueError(f"Output specification has no path: '{text}'")

        fmt = default_format
        transform = None
        for part in parts[1:]:
            if not part:
                continue
            key, sep, value = part.partition("=")
            key = key.strip().lower()
            value = value.strip()
            if not sep or not value:
                raise ValueError(f"Invalid output option '{part}' in '{text}'")
            if key == "format":
                fmt = value.lower()
            elif key == "transform":
                transform = value
            else:
                raise ValueError(f"Unknown output option '{key}' in '{text}'")

        return cls(output_path=output_path, format=fmt, transform=transform)

    def __str__(self) -> str:
        text = f"{self.output_path};format={self.format}"
        if self.transform:
            text += f";transform={self.transform}"
        return text


@dataclass(frozen=True)
class InvocationOptions:
    """Options for one console runner invocation.

    Created once by the command line and never mutated afterwards.
    """
    input_files: tuple[str, ...] = ()
    process_model: Optional[str] = None
    domain_usage: Optional[str] = None
    framework: Optional[str] = None
    default_timeout: int = UNSET_TIMEOUT
    trace_level: Optional[str] = None
    active_config: Optional[str] = None
    work_directory: Optional[str] = None
    stop_on_error: bool = False
    test_list: tuple[str, ...] = ()
    include: Optional[str] = None
    exclude: Optional[str] = None
    output_path: Optional[str] = None
    error_path: Optional[str] = None
    result_specs: tuple[OutputSpecification, ...] = field(default_factory=tuple)
    explore_specs: tuple[OutputSpecification, ...] = field(default_factory=tuple)
    explore: bool = False
    labels: bool = False
