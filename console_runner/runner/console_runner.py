"""Console runner - orchestrates one explore or run invocation.

Coordinates the full flow:
1. Build request and filter from options
2. Redirect output (run only)
3. Dispatch to the engine
4. Restore output
5. Report errors, or report results and write output files
6. Resolve the exit code
"""

import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from ..engine.protocol import TestEngine
from ..engine.results import EngineResult
from ..errors import OutputWriteError
from ..options.schema import InvocationOptions, OutputSpecification
from ..reporting.case_writer import TestCaseOutputWriter
from ..reporting.output_manager import OutputManager
from ..reporting.result_reporter import ResultReporter
from ..request.builder import ExecutionRequest, build_filter, build_request
from ..request.filter import TestFilter
from .classifier import classify
from .dispatcher import RunMode, dispatch
from .events import TestEventHandler
from .exit_codes import ExitCode, resolve_exit_code
from .redirect import OutputRedirector


class ConsoleRunner:
    """Runs or explores tests according to invocation options.

    Each call to ``execute`` is independent; the runner keeps no state
    between calls.
    """

    def __init__(
        self,
        engine: TestEngine,
        options: InvocationOptions,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        """Initialize console runner.

        Args:
            engine: Test engine to dispatch to.
            options: Parsed invocation options.
            out: Stream for reports. Default: the current sys.stdout.
            err: Stream for errors. Default: the current sys.stderr.
        """
        self.engine = engine
        self.options = options
        self._out = out
        self._err = err

        self.work_directory = Path(options.work_directory or Path.cwd())
        self.work_directory.mkdir(parents=True, exist_ok=True)

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def execute(self) -> int:
        """Execute tests according to the options.

        Returns:
            Process exit code.

        Raises:
            ValueError: If the options name no input files.
            Exception: Whatever the engine raises, after output is restored.
        """
        request = build_request(self.options)
        test_filter = build_filter(self.options)

        if self.options.explore:
            return self._explore_tests(request, test_filter)
        return self._run_tests(request, test_filter)

    def _explore_tests(self, request: ExecutionRequest, test_filter: TestFilter) -> int:
        result = dispatch(self.engine, request, test_filter, RunMode.EXPLORE)
        return classify(result, self._report_errors, self._report_explore)

    def _run_tests(self, request: ExecutionRequest, test_filter: TestFilter) -> int:
        self._display_requested_options()

        with OutputRedirector(self.options, self.work_directory) as scoped:
            handler = TestEventHandler(
                out=scoped.out_file or self.out,
                err=scoped.err_file or self.err,
                labels=self.options.labels,
            )
            result = dispatch(self.engine, request, test_filter, RunMode.RUN, handler)

        return classify(result, self._report_errors, self._report_run)

    def _report_explore(self, result: EngineResult) -> int:
        specs = self.options.explore_specs
        if not specs:
            TestCaseOutputWriter().write(result.tree, self.out)
            return resolve_exit_code(RunMode.EXPLORE, result)

        manager = OutputManager(result.tree, self.work_directory, out=self.out)
        failures = self._write_outputs(manager.write_test_file, specs)

        if failures:
            return ExitCode.UNEXPECTED_ERROR
        return resolve_exit_code(RunMode.EXPLORE, result)

    def _report_run(self, result: EngineResult) -> int:
        reporter = ResultReporter(result.tree, out=self.out)
        reporter.report_results()

        manager = OutputManager(result.tree, self.work_directory, out=self.out)
        failures = self._write_outputs(manager.write_result_file, self.options.result_specs)

        if failures:
            return ExitCode.UNEXPECTED_ERROR
        return resolve_exit_code(RunMode.RUN, result, reporter.summary)

    def _report_errors(self, result: EngineResult) -> int:
        for error in result.errors:
            if error.message is None:
                continue
            print(f"Load failure: {error.message}", file=self.err)
            if error.stack_trace:
                print(error.stack_trace, file=self.err)
        return ExitCode.UNEXPECTED_ERROR

    def _write_outputs(
        self,
        write: Callable[[OutputSpecification], Path],
        specs: tuple[OutputSpecification, ...],
    ) -> int:
        """Attempt every destination; return how many could not be written."""
        failures = 0
        for spec in specs:
            try:
                write(spec)
            except OutputWriteError as e:
                failures += 1
                print(f"Warning: Failed to write {spec.output_path}: {e}", file=self.err)
        return failures

    def _display_requested_options(self) -> None:
        options = self.options
        print(
            f"ProcessModel: {options.process_model or 'Default'}    "
            f"DomainUsage: {options.domain_usage or 'Default'}",
            file=self.out,
        )
        print(f"Execution Runtime: {options.framework or 'Not Specified'}", file=self.out)
        print(file=self.out)

        if options.test_list:
            print("Selected test(s):", file=self.out)
            for name in options.test_list:
                print(f"    {name}", file=self.out)

        if options.include:
            print(f"Included categories: {options.include}", file=self.out)

        if options.exclude:
            print(f"Excluded categories: {options.exclude}", file=self.out)
