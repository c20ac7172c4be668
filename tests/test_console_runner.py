"""End-to-end tests of ConsoleRunner against an in-memory engine."""

import io
import json
import sys

import pytest

from conftest import FakeEngine, make_explore_tree, make_run_tree
from console_runner.engine.results import EngineResult, TestEvent
from console_runner.options.schema import InvocationOptions, OutputSpecification
from console_runner.runner.console_runner import ConsoleRunner
from console_runner.runner.exit_codes import ExitCode
from console_runner.runner.redirect import OutputRedirector


def make_runner(engine, tmp_path, **option_values):
    option_values.setdefault("input_files", ("lib.dll",))
    options = InvocationOptions(work_directory=str(tmp_path), **option_values)
    out, err = io.StringIO(), io.StringIO()
    return ConsoleRunner(engine, options, out=out, err=err), out, err


class TestExplore:

    def test_default_report_goes_to_stdout(self, tmp_path):
        tree = make_explore_tree("Lib.Tests.A", "Lib.Tests.B")
        engine = FakeEngine(explore_result=EngineResult.success(tree))
        runner, out, err = make_runner(engine, tmp_path, explore=True)

        code = runner.execute()

        assert code == ExitCode.OK
        assert out.getvalue() == "Lib.Tests.A\nLib.Tests.B\n"
        assert err.getvalue() == ""
        assert list(tmp_path.iterdir()) == []
        assert [c[0] for c in engine.calls] == ["explore"]

    def test_specs_write_files_instead_of_default_report(self, tmp_path):
        tree = make_explore_tree("Lib.Tests.A")
        engine = FakeEngine(explore_result=EngineResult.success(tree))
        specs = (
            OutputSpecification("tests.txt", format="cases"),
            OutputSpecification("tests.json", format="json"),
        )
        runner, out, _ = make_runner(engine, tmp_path, explore=True, explore_specs=specs)

        code = runner.execute()

        assert code == 0
        assert (tmp_path / "tests.txt").read_text(encoding="utf-8") == "Lib.Tests.A\n"
        report = json.loads((tmp_path / "tests.json").read_text(encoding="utf-8"))
        assert report["test_count"] == 1
        assert "Lib.Tests.A\n" not in out.getvalue().splitlines(keepends=True)

    def test_engine_error_is_reported(self, tmp_path, load_failure):
        engine = FakeEngine(explore_result=load_failure)
        runner, out, err = make_runner(engine, tmp_path, explore=True)

        assert runner.execute() == ExitCode.UNEXPECTED_ERROR
        assert "Load failure: bad assembly" in err.getvalue()
        assert out.getvalue() == ""


class TestRun:

    def test_failures_and_errors_become_exit_code(self, tmp_path):
        tree = make_run_tree(passed=7, failed=2, errors=1)
        engine = FakeEngine(run_result=EngineResult.success(tree))
        specs = (
            OutputSpecification("TestResult.json", format="json"),
            OutputSpecification("TestResult.xml", format="xml"),
        )
        runner, out, _ = make_runner(engine, tmp_path, result_specs=specs)

        code = runner.execute()

        assert code == 3
        assert sorted(p.name for p in tmp_path.iterdir()) == ["TestResult.json", "TestResult.xml"]
        report = json.loads((tmp_path / "TestResult.json").read_text(encoding="utf-8"))
        assert report["summary"]["total"] == 10
        assert report["summary"]["errors_and_failures"] == 3
        assert "Test Count: 10, Passed: 7, Failed: 2, Errors: 1" in out.getvalue()

    def test_all_passing_is_ok(self, tmp_path):
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=4, skipped=1)))
        runner, out, _ = make_runner(engine, tmp_path)

        assert runner.execute() == ExitCode.OK
        assert "Overall result: Passed" in out.getvalue()

    def test_engine_error_prints_message_and_trace(self, tmp_path, load_failure):
        engine = FakeEngine(run_result=load_failure)
        runner, _, err = make_runner(
            engine, tmp_path, result_specs=(OutputSpecification("TestResult.json"),)
        )

        code = runner.execute()

        assert code == -100
        assert err.getvalue() == "Load failure: bad assembly\nat Loader.Load()\n"
        assert not (tmp_path / "TestResult.json").exists()

    def test_engine_error_with_redirection_restores_output(self, tmp_path, load_failure,
                                                            monkeypatch):
        before_out, before_err = sys.stdout, sys.stderr
        restored = []
        original_restore = OutputRedirector.restore

        def recording_restore(self, scoped):
            restored.append(scoped)
            original_restore(self, scoped)

        monkeypatch.setattr(OutputRedirector, "restore", recording_restore)
        engine = FakeEngine(run_result=load_failure)
        runner, _, err = make_runner(engine, tmp_path, output_path="out.txt",
                                     error_path="err.txt")

        assert runner.execute() == ExitCode.UNEXPECTED_ERROR

        assert sys.stdout is before_out
        assert sys.stderr is before_err
        assert len(restored) == 1
        assert restored[0].out_file.closed
        assert restored[0].err_file.closed
        assert (tmp_path / "err.txt").read_text(encoding="utf-8") == "engine stderr during run\n"
        assert err.getvalue() == "Load failure: bad assembly\nat Loader.Load()\n"

    def test_requested_options_are_displayed(self, tmp_path):
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=1)))
        runner, out, _ = make_runner(
            engine, tmp_path, process_model="Separate", test_list=("Lib.Tests.A",),
            include="Fast", exclude="Slow",
        )

        runner.execute()

        text = out.getvalue()
        assert "ProcessModel: Separate" in text
        assert "Execution Runtime: Not Specified" in text
        assert "    Lib.Tests.A" in text
        assert "Included categories: Fast" in text
        assert "Excluded categories: Slow" in text

    def test_request_settings_and_filter_reach_engine(self, tmp_path):
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=1)))
        runner, _, _ = make_runner(engine, tmp_path, input_files=("a.dll", "b.dll"),
                                   default_timeout=250, include="Fast")

        runner.execute()

        _, request, test_filter, _ = engine.calls[0]
        assert request.input_files == ("a.dll", "b.dll")
        assert request.settings.to_engine_settings() == {
            "DefaultTimeout": 250,
            "WorkDirectory": str(tmp_path),
        }
        assert test_filter.include == ("Fast",)

    def test_output_redirected_during_run_and_restored(self, tmp_path):
        before_out, before_err = sys.stdout, sys.stderr
        events = [
            TestEvent(kind="start-test", full_name="Lib.Tests.Passing0"),
            TestEvent(kind="test-output", full_name="Lib.Tests.Passing0", text="hello"),
            TestEvent(kind="test-output", stream="error", text="oops\n"),
            TestEvent(kind="test-case", full_name="Lib.Tests.Passing0", result="Passed"),
        ]
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=1)),
                            events=events)
        runner, out, _ = make_runner(engine, tmp_path, output_path="out.txt",
                                     error_path="err.txt", labels=True)

        assert runner.execute() == 0

        assert sys.stdout is before_out
        assert sys.stderr is before_err
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == (
            "engine stdout during run\n***** Lib.Tests.Passing0\nhello\n"
        )
        assert (tmp_path / "err.txt").read_text(encoding="utf-8") == (
            "engine stderr during run\noops\n"
        )
        assert "Test Run Summary" in out.getvalue()

    def test_engine_crash_restores_output_and_propagates(self, tmp_path):
        before_out, before_err = sys.stdout, sys.stderr
        engine = FakeEngine(raise_on_run=RuntimeError("engine crashed"))
        runner, _, _ = make_runner(engine, tmp_path, output_path="out.txt",
                                   error_path="err.txt")

        with pytest.raises(RuntimeError, match="engine crashed"):
            runner.execute()

        assert sys.stdout is before_out
        assert sys.stderr is before_err
        assert "engine stdout during run" in (tmp_path / "out.txt").read_text(encoding="utf-8")

    def test_failed_destination_does_not_stop_others(self, tmp_path):
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=2)))
        specs = (
            OutputSpecification("bad.out", format="html"),
            OutputSpecification("good.json", format="json"),
        )
        runner, _, err = make_runner(engine, tmp_path, result_specs=specs)

        code = runner.execute()

        assert code == ExitCode.UNEXPECTED_ERROR
        assert (tmp_path / "good.json").exists()
        assert not (tmp_path / "bad.out").exists()
        assert "Warning: Failed to write bad.out" in err.getvalue()

    def test_unencodable_result_does_not_stop_later_destinations(self, tmp_path):
        tree = make_run_tree(passed=1, failed=1)
        tree.children[0].children[1].message = "bad \ud800 text"
        engine = FakeEngine(run_result=EngineResult.success(tree))
        specs = (
            OutputSpecification("first.json", format="json"),
            OutputSpecification("second.cases", format="cases"),
        )
        runner, _, err = make_runner(engine, tmp_path, result_specs=specs)

        code = runner.execute()

        assert code == ExitCode.UNEXPECTED_ERROR
        assert not (tmp_path / "first.json").exists()
        assert (tmp_path / "second.cases").read_text(encoding="utf-8").splitlines() == [
            "Lib.Tests.Passing0",
            "Lib.Tests.Failing0",
        ]
        assert "Warning: Failed to write first.json" in err.getvalue()

    def test_execute_is_repeatable(self, tmp_path):
        engine = FakeEngine(run_result=EngineResult.success(make_run_tree(passed=1, failed=1)))
        runner, _, _ = make_runner(engine, tmp_path,
                                   result_specs=(OutputSpecification("r.json"),))

        assert runner.execute() == 1
        assert runner.execute() == 1
        assert len(engine.calls) == 2


def test_work_directory_is_created(tmp_path):
    work = tmp_path / "nested" / "work"
    options = InvocationOptions(input_files=("lib.dll",), work_directory=str(work))

    ConsoleRunner(FakeEngine(), options)

    assert work.is_dir()


def test_missing_input_files_fail_fast(tmp_path):
    engine = FakeEngine()
    runner, _, _ = make_runner(engine, tmp_path, input_files=())

    with pytest.raises(ValueError):
        runner.execute()
    assert engine.calls == []
