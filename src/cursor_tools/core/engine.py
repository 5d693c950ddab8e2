"""Execution engine: drives one command and routes its chunks.

Consumption is strictly sequential.  The engine pulls a chunk from the
command's iterator, writes it everywhere it needs to go, and only then
pulls the next one.  File failures are recovered locally; a failure of
the iterator itself is fatal and surfaces as :class:`CommandError`.

Guarantees
----------
* Terminal and file receive chunks in production order, unbuffered.
* A :class:`SinkError` never interrupts the terminal stream.
* No ``print()``: all diagnostics go through injected callables.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from cursor_tools.core.options import Options
from cursor_tools.core.protocols import Command
from cursor_tools.core.sink import FileSink, OutputSink
from cursor_tools.exceptions import CommandError, SinkError


def _ignore(_message: str) -> None:
    return None


class ExecutionEngine:
    """Runs a single :class:`Command` to completion.

    Parameters
    ----------
    stdout, stderr:
        Terminal streams.  Resolved from :mod:`sys` at run time when
        omitted, so redirected streams are honoured.
    warn:
        Receives advisory messages (sink failures).
    notify:
        Receives the final "saved to" message.
    """

    def __init__(
        self,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        warn: Callable[[str], None] = _ignore,
        notify: Callable[[str], None] = _ignore,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._warn = warn
        self._notify = notify

    def prepare_file_sink(self, destination: str | None) -> FileSink | None:
        """Set up the ``--save-to`` file, or return ``None`` if unusable."""
        if not destination:
            return None
        try:
            return FileSink.prepare(destination)
        except SinkError as exc:
            self._warn(f"{exc}. Output will not be saved to a file.")
            return None

    def run(self, command: Command, query: str, options: Options) -> Path | None:
        """Stream *command*'s output and return the saved file path, if any.

        Raises
        ------
        CommandError
            When the command's chunk iterator raises.
        """
        stdout = sys.stdout if self._stdout is None else self._stdout
        stderr = sys.stderr if self._stderr is None else self._stderr

        sink = OutputSink(
            stdout,
            self.prepare_file_sink(options.save_to),
            on_file_error=self._on_file_error,
        )

        try:
            for chunk in command.execute(query, options):
                sink.emit(chunk)
        except Exception as exc:
            raise CommandError(str(exc) or type(exc).__name__) from exc

        sink.finish()
        stderr.write("\n")
        stderr.flush()

        saved = sink.file_path
        if saved is not None:
            self._notify(f"Output saved to: {saved}")
        return saved

    def _on_file_error(self, exc: SinkError) -> None:
        self._warn(f"{exc}. Further output will not be saved to the file.")
