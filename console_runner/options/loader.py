"""YAML settings loader for the console runner.

Reads the optional settings file that tells the runner where the engine
lives and which option defaults to apply.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import ConfigError
from .schema import (
    DEFAULT_EXPLORE_FORMAT,
    DEFAULT_RESULT_FORMAT,
    InvocationOptions,
    OutputSpecification,
)


DEFAULT_SETTINGS_FILE = "console-runner.yaml"
DEFAULT_ENGINE_URL = "http://127.0.0.1:8765"
ENGINE_URL_ENV = "CONSOLE_RUNNER_ENGINE_URL"

_SPEC_FIELDS = {
    "result_specs": DEFAULT_RESULT_FORMAT,
    "explore_specs": DEFAULT_EXPLORE_FORMAT,
}
_TUPLE_FIELDS = {"input_files", "test_list"}


@dataclass
class RunnerConfig:
    """Settings loaded from the YAML settings file."""
    engine_url: Optional[str] = None
    request_timeout: float = 30.0
    poll_interval: float = 1.0
    defaults: dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None


def load_runner_config(file_path: Optional[Union[str, Path]] = None) -> RunnerConfig:
    """Load runner settings from a YAML file.

    Args:
        file_path: Settings file. None = ``console-runner.yaml`` in the
            current directory, if present.

    Returns:
        RunnerConfig. Defaults are returned when the implicit file is absent.

    Raises:
        ConfigError: If an explicit file is missing or the content is malformed.
    """
    if file_path is None:
        path = Path(DEFAULT_SETTINGS_FILE)
        if not path.exists():
            return RunnerConfig()
    else:
        path = Path(file_path)
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return RunnerConfig(source=str(path))

    return parse_runner_config(data, source=str(path))


def parse_runner_config(data: Any, source: str = "<inline>") -> RunnerConfig:
    """Build a RunnerConfig from already loaded YAML data.

    Raises:
        ConfigError: If sections or values have the wrong shape.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a YAML mapping, got {type(data).__name__} ({source})")

    engine = data.get("engine") or {}
    if not isinstance(engine, dict):
        raise ConfigError(f"'engine' must be a mapping in {source}")

    config = RunnerConfig(source=source)

    url = engine.get("url")
    if url is not None:
        if not isinstance(url, str) or not url:
            raise ConfigError(f"'engine.url' must be a non-empty string in {source}")
        config.engine_url = url

    for name in ("request_timeout", "poll_interval"):
        if name in engine:
            value = engine[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"'engine.{name}' must be a positive number in {source}")
            setattr(config, name, float(value))

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(f"'defaults' must be a mapping in {source}")
    config.defaults = _normalize_defaults(defaults, source)

    return config


def resolve_engine_url(
    explicit: Optional[str] = None, config: Optional[RunnerConfig] = None
) -> str:
    """Pick the engine URL: command line, environment, settings file, default."""
    if explicit:
        return explicit

    env_url = os.environ.get(ENGINE_URL_ENV)
    if env_url and env_url.strip():
        return env_url.strip()

    if config and config.engine_url:
        return config.engine_url

    return DEFAULT_ENGINE_URL


def apply_defaults(values: dict[str, Any], defaults: dict[str, Any]) -> InvocationOptions:
    """Build InvocationOptions, filling unset values from settings defaults.

    Args:
        values: Option values from the command line. None, empty tuples and
            the timeout sentinel count as unset.
        defaults: Normalized ``defaults`` section of the settings file.

    Returns:
        Immutable InvocationOptions.
    """
    merged = dict(values)
    for name, value in defaults.items():
        if _is_unset(name, merged.get(name)):
            merged[name] = value
    return InvocationOptions(**merged)


def _is_unset(name: str, value: Any) -> bool:
    if value is None:
        return True
    if name == "default_timeout":
        return value < 0
    if isinstance(value, bool):
        return value is False
    if isinstance(value, tuple):
        return len(value) == 0
    return False


def _normalize_defaults(defaults: dict, source: str) -> dict[str, Any]:
    known = {f.name for f in fields(InvocationOptions)}
    normalized: dict[str, Any] = {}

    for name, value in defaults.items():
        if name not in known:
            raise ConfigError(f"Unknown option '{name}' in defaults ({source})")

        if name in _SPEC_FIELDS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list):
                raise ConfigError(f"'defaults.{name}' must be a list in {source}")
            try:
                value = tuple(
                    OutputSpecification.parse(str(v), default_format=_SPEC_FIELDS[name])
                    for v in value
                )
            except ValueError as e:
                raise ConfigError(f"{e} ({source})") from e

        elif name in _TUPLE_FIELDS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list):
                raise ConfigError(f"'defaults.{name}' must be a list in {source}")
            value = tuple(str(v) for v in value)

        elif name == "default_timeout":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"'defaults.default_timeout' must be an integer in {source}")

        elif name in ("stop_on_error", "explore", "labels"):
            if not isinstance(value, bool):
                raise ConfigError(f"'defaults.{name}' must be true or false in {source}")

        elif value is not None:
            value = str(value)

        normalized[name] = value

    return normalized
