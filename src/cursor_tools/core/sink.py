"""Output sinks: the terminal stream and the optional ``--save-to`` file.

Every chunk is fanned out to the terminal first, then to the file.  The
file sink is independently disable-able: once it fails it stays off for
the rest of the invocation, and the terminal never notices.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from cursor_tools.exceptions import SinkError


class FileSink:
    """Append-only text file written by a single writer."""

    def __init__(self, path: Path) -> None:
        self.path: Path = path

    @classmethod
    def prepare(cls, destination: str | Path) -> FileSink:
        """Create parent directories and truncate *destination*.

        Raises
        ------
        SinkError
            When the directory cannot be created or the file cleared.
        """
        path = Path(destination)
        parent = path.parent
        if parent != Path("."):
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise SinkError(f"Failed to create directory {parent}: {exc}") from exc
        try:
            path.write_text("", encoding="utf-8")
        except OSError as exc:
            raise SinkError(f"Failed to clear file {path}: {exc}") from exc
        return cls(path)

    def append(self, chunk: str) -> None:
        """Append *chunk* to the file.

        Raises
        ------
        SinkError
            When the write fails for any reason.
        """
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(chunk)
        except OSError as exc:
            raise SinkError(f"Failed to write to file {self.path}: {exc}") from exc


class OutputSink:
    """Fans each chunk out to *stream* and, while enabled, a :class:`FileSink`.

    Parameters
    ----------
    stream:
        Terminal destination, normally ``sys.stdout``.
    file_sink:
        Optional file destination.
    on_file_error:
        Called once with the :class:`SinkError` that disabled the file.
    """

    def __init__(
        self,
        stream: TextIO,
        file_sink: FileSink | None = None,
        *,
        on_file_error: Callable[[SinkError], None] | None = None,
    ) -> None:
        self._stream = stream
        self._file_sink = file_sink
        self._on_file_error = on_file_error

    @property
    def file_path(self) -> Path | None:
        """Path of the file destination, or ``None`` if disabled."""
        return self._file_sink.path if self._file_sink is not None else None

    def emit(self, chunk: str) -> None:
        self._stream.write(chunk)
        self._stream.flush()

        if self._file_sink is None:
            return
        try:
            self._file_sink.append(chunk)
        except SinkError as exc:
            self._file_sink = None
            if self._on_file_error is not None:
                self._on_file_error(exc)

    def finish(self) -> None:
        """Terminate the terminal stream with a newline and flush."""
        self._stream.write("\n")
        self._stream.flush()
