"""Scoped redirection of the process's standard output and error.

stdout/stderr are process-global, so only one redirection may be active
at a time. Restoration always reinstates the exact stream objects that were
active before redirection.
"""

import os
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Union

from ..options.schema import InvocationOptions


_redirect_lock = threading.Lock()


class AutoFlushWriter:
    """Text stream wrapper that flushes after every write."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def write(self, text: str) -> int:
        count = self._stream.write(text)
        self._stream.flush()
        return count

    def writelines(self, lines) -> None:
        self._stream.writelines(lines)
        self._stream.flush()

    def __getattr__(self, name):
        return getattr(self._stream, name)


@dataclass
class ScopedOutputs:
    """Streams active during one redirection."""
    out: TextIO
    err: TextIO
    saved_out: TextIO
    saved_err: TextIO
    out_file: Optional[AutoFlushWriter] = None
    err_file: Optional[AutoFlushWriter] = None

    @property
    def is_redirected(self) -> bool:
        return self.out_file is not None or self.err_file is not None


class OutputRedirector:
    """Installs file sinks for stdout/stderr for the duration of a run."""

    def __init__(self, options: InvocationOptions, work_directory: Union[str, Path]):
        """Initialize output redirector.

        Args:
            options: Invocation options carrying output_path / error_path.
            work_directory: Directory the redirect paths are relative to.
        """
        self.output_path = options.output_path
        self.error_path = options.error_path
        self.work_directory = Path(work_directory)
        self._scoped: Optional[ScopedOutputs] = None

    def redirect(self) -> ScopedOutputs:
        """Open the requested sinks and install them.

        Returns:
            ScopedOutputs to pass to ``restore``.

        Raises:
            OSError: If a sink cannot be opened. Nothing is installed then.
        """
        _redirect_lock.acquire()
        try:
            saved_out, saved_err = sys.stdout, sys.stderr
            out_file = err_file = None
            try:
                if self.output_path:
                    out_file = self._open(self.output_path)
                if self.error_path:
                    err_file = self._open(self.error_path)
            except OSError:
                if out_file is not None:
                    out_file.close()
                raise

            scoped = ScopedOutputs(
                out=out_file or saved_out,
                err=err_file or saved_err,
                saved_out=saved_out,
                saved_err=saved_err,
                out_file=out_file,
                err_file=err_file,
            )
            if out_file is not None:
                sys.stdout = out_file
            if err_file is not None:
                sys.stderr = err_file
        except BaseException:
            _redirect_lock.release()
            raise

        return scoped

    def restore(self, scoped: ScopedOutputs) -> None:
        """Reinstate the original streams, then flush and close opened sinks."""
        try:
            sys.stdout = scoped.saved_out
            sys.stderr = scoped.saved_err
            try:
                _close(scoped.out_file)
            finally:
                _close(scoped.err_file)
            scoped.saved_out.flush()
            scoped.saved_err.flush()
        finally:
            _redirect_lock.release()

    def _open(self, relative_path: str) -> AutoFlushWriter:
        path = self.work_directory / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        return AutoFlushWriter(open(os.fspath(path), "w", encoding="utf-8"))

    def __enter__(self) -> ScopedOutputs:
        self._scoped = self.redirect()
        return self._scoped

    def __exit__(self, *args):
        scoped, self._scoped = self._scoped, None
        self.restore(scoped)


def _close(sink: Optional[AutoFlushWriter]) -> None:
    if sink is None:
        return
    try:
        sink.flush()
    finally:
        sink.close()
