"""Tests for scoped stdout/stderr redirection."""

import sys

import pytest

from console_runner.options.schema import InvocationOptions
from console_runner.runner.redirect import OutputRedirector


def make_redirector(tmp_path, output_path=None, error_path=None):
    options = InvocationOptions(input_files=("a.dll",), output_path=output_path,
                                error_path=error_path)
    return OutputRedirector(options, tmp_path)


def test_no_overrides_is_a_no_op(tmp_path):
    before_out, before_err = sys.stdout, sys.stderr
    redirector = make_redirector(tmp_path)

    with redirector as scoped:
        assert sys.stdout is before_out
        assert sys.stderr is before_err
        assert scoped.out is before_out
        assert not scoped.is_redirected

    assert sys.stdout is before_out
    assert sys.stderr is before_err
    assert list(tmp_path.iterdir()) == []


def test_output_and_error_are_written_to_files(tmp_path):
    before_out, before_err = sys.stdout, sys.stderr

    with make_redirector(tmp_path, "out.txt", "logs/err.txt") as scoped:
        print("to stdout")
        print("to stderr", file=sys.stderr)
        assert sys.stdout is scoped.out_file
        # Auto-flush: content is on disk before the sink is closed.
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "to stdout\n"

    assert sys.stdout is before_out
    assert sys.stderr is before_err
    assert scoped.out_file.closed
    assert scoped.err_file.closed
    assert (tmp_path / "logs" / "err.txt").read_text(encoding="utf-8") == "to stderr\n"


def test_streams_restored_when_body_raises(tmp_path):
    before_out, before_err = sys.stdout, sys.stderr

    with pytest.raises(RuntimeError):
        with make_redirector(tmp_path, "out.txt", "err.txt"):
            raise RuntimeError("engine crashed")

    assert sys.stdout is before_out
    assert sys.stderr is before_err


def test_explicit_redirect_and_restore(tmp_path):
    before_out = sys.stdout
    redirector = make_redirector(tmp_path, output_path="out.txt")

    scoped = redirector.redirect()
    try:
        assert sys.stdout is not before_out
        assert scoped.saved_out is before_out
        assert scoped.err is sys.stderr
    finally:
        redirector.restore(scoped)

    assert sys.stdout is before_out


def test_failed_open_installs_nothing(tmp_path):
    before_out, before_err = sys.stdout, sys.stderr
    (tmp_path / "blocked").mkdir()
    # A directory cannot be opened for writing.
    redirector = make_redirector(tmp_path, "out.txt", "blocked")

    with pytest.raises(OSError):
        redirector.redirect()

    assert sys.stdout is before_out
    assert sys.stderr is before_err

    # The lock was released: a new redirection can be acquired.
    with make_redirector(tmp_path, "again.txt"):
        pass
