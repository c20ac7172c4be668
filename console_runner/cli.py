"""CLI entry point for the console runner.

Usage:
    console-runner <input files> [options]
    python -m console_runner.cli <input files> [options]
"""

import sys
from pathlib import Path
from typing import Optional

import click

from .engine.http_engine import HttpEngine
from .errors import ConfigError
from .options.loader import apply_defaults, load_runner_config, resolve_engine_url
from .options.schema import (
    DEFAULT_EXPLORE_FORMAT,
    DEFAULT_RESULT_FORMAT,
    UNSET_TIMEOUT,
    OutputSpecification,
)
from .runner.console_runner import ConsoleRunner
from .runner.exit_codes import ExitCode

INTERRUPTED = 130


def _parse_specs(default_format: str):
    def callback(ctx, param, values):
        try:
            return tuple(
                OutputSpecification.parse(v, default_format=default_format) for v in values
            )
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
    return callback


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("inputs", nargs=-1)
@click.option("--process", "process_model", help="Process model for the tests (e.g. Single, Separate, Multiple).")
@click.option("--domain", "domain_usage", help="Domain usage for the tests (e.g. None, Single, Multiple).")
@click.option("--framework", help="Runtime framework to run the tests under.")
@click.option("--timeout", "default_timeout", type=int, default=UNSET_TIMEOUT, show_default=False,
              help="Default timeout for each test case in milliseconds.")
@click.option("--trace", "trace_level", help="Internal trace level of the engine.")
@click.option("--config", "active_config", help="Project configuration to load.")
@click.option("--work", "work_directory", help="Directory for output files (created if absent).")
@click.option("--stoponerror", "stop_on_error", is_flag=True, help="Stop the run on the first failure.")
@click.option("--test", "test_names", multiple=True, help="Test name(s) to run, comma separated. Repeatable.")
@click.option("--testlist", type=click.Path(exists=True, dir_okay=False),
              help="File holding one test name per line.")
@click.option("--include", help="Category expression of tests to include.")
@click.option("--exclude", help="Category expression of tests to exclude.")
@click.option("--output", "--out", "output_path", help="File (under --work) receiving test output.")
@click.option("--err", "error_path", help="File (under --work) receiving test error output.")
@click.option("--result", "result_specs", multiple=True, callback=_parse_specs(DEFAULT_RESULT_FORMAT),
              help="Result file spec PATH[;format=json|xml|cases][;transform=NAME]. Repeatable.")
@click.option("--explore", is_flag=True, help="List tests instead of running them.")
@click.option("--explore-output", "explore_specs", multiple=True,
              callback=_parse_specs(DEFAULT_EXPLORE_FORMAT),
              help="Explore output file spec. Repeatable. Default: test names on stdout.")
@click.option("--labels", is_flag=True, help="Label each test's output with its name.")
@click.option("--engine-url", help="Base URL of the test engine agent.")
@click.option("--settings", "settings_file", help="YAML settings file. Default: ./console-runner.yaml")
def cli(
    inputs: tuple[str, ...],
    test_names: tuple[str, ...],
    testlist: Optional[str],
    engine_url: Optional[str],
    settings_file: Optional[str],
    **values,
) -> int:
    """Run or explore the tests in INPUTS with the test engine."""
    try:
        config = load_runner_config(settings_file)
    except ConfigError as e:
        output_error(str(e))
        return ExitCode.INVALID_ARG

    values["input_files"] = tuple(inputs)
    values["test_list"] = _collect_test_names(test_names, testlist)
    options = apply_defaults(values, config.defaults)

    if not options.input_files:
        output_error("At least one input file is required.")
        return ExitCode.INVALID_ARG

    for input_file in options.input_files:
        if not Path(input_file).exists():
            output_error(f"File not found: {input_file}")
            return ExitCode.FILE_NOT_FOUND

    engine = HttpEngine(
        resolve_engine_url(engine_url, config),
        request_timeout=config.request_timeout,
        poll_interval=config.poll_interval,
    )

    try:
        with engine:
            return ConsoleRunner(engine, options).execute()

    except KeyboardInterrupt:
        output_error("Test run interrupted by user")
        return INTERRUPTED

    except Exception as e:
        output_error(f"Unexpected error: {type(e).__name__}: {e}")
        return ExitCode.UNEXPECTED_ERROR


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        code = cli.main(args=argv, prog_name="console-runner", standalone_mode=False)
    except click.exceptions.Abort:
        output_error("Test run interrupted by user")
        return INTERRUPTED
    except click.ClickException as e:
        e.show()
        return ExitCode.INVALID_ARG

    return int(code or 0)


def _collect_test_names(test_names: tuple[str, ...], testlist: Optional[str]) -> tuple[str, ...]:
    """Merge --test values (comma separated) with names read from --testlist."""
    names: list[str] = []
    for value in test_names:
        names.extend(n.strip() for n in value.split(",") if n.strip())

    if testlist:
        with open(testlist, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    names.append(line)

    return tuple(names)


def output_error(message: str) -> None:
    """Print an error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
