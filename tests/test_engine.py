"""Tests for the execution engine and output sinks (core/engine.py, core/sink.py)."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest

from cursor_tools.core.engine import ExecutionEngine
from cursor_tools.core.options import Options
from cursor_tools.core.sink import FileSink, OutputSink
from cursor_tools.exceptions import CommandError, SinkError


def _engine(**kwargs: Any) -> tuple[ExecutionEngine, io.StringIO, io.StringIO, list[str], list[str]]:
    stdout, stderr = io.StringIO(), io.StringIO()
    warnings: list[str] = []
    notices: list[str] = []
    engine = ExecutionEngine(
        stdout=stdout,
        stderr=stderr,
        warn=warnings.append,
        notify=notices.append,
        **kwargs,
    )
    return engine, stdout, stderr, warnings, notices


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------

class TestStreaming:
    def test_chunks_written_in_order(self, stub_command: Any) -> None:
        engine, stdout, stderr, warnings, _ = _engine()
        saved = engine.run(stub_command(["a", "b", "c"]), "q", Options())

        assert stdout.getvalue() == "abc\n"
        assert stderr.getvalue() == "\n"
        assert saved is None
        assert warnings == []

    def test_command_receives_query_and_options(self, stub_command: Any) -> None:
        engine, *_ = _engine()
        command = stub_command(["x"])
        options = Options(model="m")
        engine.run(command, "the query", options)
        assert command.calls == [("the query", options)]

    def test_each_chunk_written_before_next_is_requested(self, stub_command: Any) -> None:
        engine, stdout, *_ = _engine()
        seen: list[str] = []
        command = stub_command(["a", "b", "c"], on_chunk=lambda _i: seen.append(stdout.getvalue()))
        engine.run(command, "q", Options())
        assert seen == ["a", "ab", "abc"]

    def test_empty_stream(self, stub_command: Any) -> None:
        engine, stdout, *_ = _engine()
        engine.run(stub_command([]), "q", Options())
        assert stdout.getvalue() == "\n"


# ---------------------------------------------------------------------------
# File sink
# ---------------------------------------------------------------------------

class TestSaveTo:
    def test_file_receives_same_chunks(self, stub_command: Any, tmp_path: Path) -> None:
        engine, stdout, _, _, notices = _engine()
        target = tmp_path / "out.txt"
        saved = engine.run(stub_command(["a", "b", "c"]), "q", Options(save_to=str(target)))

        assert target.read_text(encoding="utf-8") == "abc"
        assert stdout.getvalue() == "abc\n"
        assert saved == target
        assert notices == [f"Output saved to: {target}"]

    def test_existing_file_is_truncated(self, stub_command: Any, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        target.write_text("old contents", encoding="utf-8")
        engine, *_ = _engine()
        engine.run(stub_command(["new"]), "q", Options(save_to=str(target)))
        assert target.read_text(encoding="utf-8") == "new"

    def test_parent_directories_created(self, stub_command: Any, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "er" / "out.txt"
        engine, *_ = _engine()
        engine.run(stub_command(["a"]), "q", Options(save_to=str(target)))
        assert target.read_text(encoding="utf-8") == "a"

    def test_uncreatable_directory_disables_file(self, stub_command: Any, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        engine, stdout, _, warnings, notices = _engine()

        saved = engine.run(
            stub_command(["a", "b", "c"]), "q", Options(save_to=str(blocker / "sub" / "out.txt")),
        )

        assert stdout.getvalue() == "abc\n"
        assert saved is None
        assert len(warnings) == 1
        assert "will not be saved" in warnings[0]
        assert notices == []

    def test_append_failure_disables_file_once(self, stub_command: Any, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"

        def break_file(index: int) -> None:
            if index == 0:
                target.unlink()
                target.mkdir()

        engine, stdout, _, warnings, notices = _engine()
        saved = engine.run(
            stub_command(["a", "b", "c"], on_chunk=break_file), "q", Options(save_to=str(target)),
        )

        assert stdout.getvalue() == "abc\n"
        assert saved is None
        assert len(warnings) == 1
        assert notices == []


# ---------------------------------------------------------------------------
# Command failure
# ---------------------------------------------------------------------------

class TestCommandFailure:
    def test_error_from_iterator_becomes_command_error(
        self, stub_command: Any, tmp_path: Path,
    ) -> None:
        target = tmp_path / "out.txt"
        engine, stdout, *_ = _engine()
        command = stub_command(["a", "b", RuntimeError("backend exploded")])

        with pytest.raises(CommandError, match="backend exploded"):
            engine.run(command, "q", Options(save_to=str(target)))

        assert stdout.getvalue() == "ab"
        assert target.read_text(encoding="utf-8") == "ab"

    def test_keyboard_interrupt_propagates(self, stub_command: Any) -> None:
        engine, *_ = _engine()
        with pytest.raises(KeyboardInterrupt):
            engine.run(stub_command(["a", KeyboardInterrupt()]), "q", Options())


# ---------------------------------------------------------------------------
# Sinks in isolation
# ---------------------------------------------------------------------------

class TestSinks:
    def test_prepare_in_current_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        sink = FileSink.prepare("plain.txt")
        sink.append("x")
        assert (tmp_path / "plain.txt").read_text(encoding="utf-8") == "x"

    def test_prepare_raises_sink_error(self, tmp_path: Path) -> None:
        target = tmp_path / "dir"
        target.mkdir()
        with pytest.raises(SinkError):
            FileSink.prepare(target)

    def test_output_sink_without_file(self) -> None:
        stream = io.StringIO()
        sink = OutputSink(stream)
        sink.emit("a")
        sink.finish()
        assert stream.getvalue() == "a\n"
        assert sink.file_path is None
