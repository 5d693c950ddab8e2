"""Tests for CLI dispatch and the error boundary (cli/app.py)."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Any

import pytest

from cursor_tools.cli import app as app_module
from cursor_tools.cli import exit_codes
from cursor_tools.cli.app import cli, main, usage_text
from cursor_tools.exceptions import MissingQueryError, UnknownCommandError, UnknownFlagError


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli(argv)
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    @pytest.mark.parametrize("token", ["version", "-v", "--version"])
    def test_prints_version(
        self,
        token: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(app_module, "read_version", lambda: "1.2.3")
        assert main([token]) == exit_codes.SUCCESS
        assert capsys.readouterr().out == "cursor-tools version 1.2.3\n"

    def test_unreadable_metadata(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def missing() -> str:
            raise metadata.PackageNotFoundError("cursor-tools")

        monkeypatch.setattr(app_module, "read_version", missing)
        assert main(["version"]) == exit_codes.GENERAL_ERROR
        assert "version" in capsys.readouterr().err

    def test_never_touches_registry_or_parser(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def forbidden(*_args: Any) -> Any:
            raise AssertionError("should not be called")

        monkeypatch.setattr(app_module, "_default_registry", forbidden)
        monkeypatch.setattr(app_module, "parse_args", forbidden)
        monkeypatch.setattr(app_module, "read_version", lambda: "0.0.1")
        assert main(["--version", "--bogus"]) == exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------

class TestUsage:
    def test_no_arguments_prints_usage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([], registry={}) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Usage:" in err
        assert "--max-tokens" in err

    def test_only_flags_prints_usage(self) -> None:
        assert main(["--debug"], registry={}) == exit_codes.GENERAL_ERROR

    def test_usage_derived_from_option_table(self) -> None:
        text = usage_text(["web"])
        assert "[--save-to <value>]" in text
        assert "[--timeout <number>]" in text
        assert "[--console|--no-console]" in text
        assert "Commands: web" in text


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_unknown_command(self, stub_command: Any) -> None:
        with pytest.raises(UnknownCommandError, match="nope") as exc_info:
            main(["nope", "q"], registry={"web": stub_command()})
        assert exc_info.value.hint == "Valid commands: web"

    def test_unknown_flag_never_dispatches(self, stub_command: Any) -> None:
        command = stub_command(["a"])
        with pytest.raises(UnknownFlagError):
            main(["web", "q", "--bogus"], registry={"web": command})
        assert command.calls == []

    def test_missing_query(self, stub_command: Any, workdir: Path) -> None:
        with pytest.raises(MissingQueryError):
            main(["web"], registry={"web": stub_command()})

    def test_default_query_substituted(self, stub_command: Any, workdir: Path) -> None:
        command = stub_command(["ok"], default_query=".")
        assert main(["install"], registry={"install": command}) == exit_codes.SUCCESS
        assert command.calls[0][0] == "."

    def test_empty_query_tolerated(self, stub_command: Any, workdir: Path) -> None:
        command = stub_command(["ok"], accepts_empty_query=True)
        assert main(["doc"], registry={"doc": command}) == exit_codes.SUCCESS
        assert command.calls[0][0] == ""

    def test_flags_before_command(self, stub_command: Any, workdir: Path) -> None:
        command = stub_command(["ok"])
        main(["--model", "m", "web", "hello", "world"], registry={"web": command})
        query, options = command.calls[0]
        assert query == "hello world"
        assert options.model == "m"

    def test_streams_to_stdout_and_file(
        self, stub_command: Any, workdir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = workdir / "out" / "answer.txt"
        code = main(
            ["web", "q", "--save-to", str(target)],
            registry={"web": stub_command(["a", "b", "c"])},
        )
        captured = capsys.readouterr()
        assert code == exit_codes.SUCCESS
        assert captured.out == "abc\n"
        assert target.read_text(encoding="utf-8") == "abc"
        assert "Output saved to" in captured.err


# ---------------------------------------------------------------------------
# Rules-file check
# ---------------------------------------------------------------------------

class TestRulesCheck:
    def test_warns_when_rules_missing(
        self, stub_command: Any, workdir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["web", "q"], registry={"web": stub_command(["a"])})
        assert ".cursorrules" in capsys.readouterr().err

    def test_install_skips_check(
        self, stub_command: Any, workdir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["install"], registry={"install": stub_command(["a"], default_query=".")})
        assert ".cursorrules" not in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_unknown_flag_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _exit_code(["web", "--bogus"]) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "--bogus" in err
        assert "--max-tokens" in err

    def test_unknown_command_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _exit_code(["nope", "q"]) == exit_codes.GENERAL_ERROR
        assert "web" in capsys.readouterr().err

    def test_missing_query_exits_one(self) -> None:
        assert _exit_code(["github"]) == exit_codes.GENERAL_ERROR

    def test_command_failure_exits_one(
        self,
        stub_command: Any,
        workdir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        registry = {"web": stub_command(["partial", RuntimeError("stream broke")])}
        monkeypatch.setattr(app_module, "_default_registry", lambda: registry)

        assert _exit_code(["web", "q"]) == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out == "partial"
        assert "stream broke" in captured.err

    def test_success_exits_zero(
        self, stub_command: Any, workdir: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(app_module, "_default_registry", lambda: {"web": stub_command(["a"])})
        assert _exit_code(["web", "q"]) == exit_codes.SUCCESS

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def interrupted(_argv: Any) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", interrupted)
        assert _exit_code([]) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def broken(_argv: Any) -> int:
            raise ValueError("bug")

        monkeypatch.setattr(app_module, "main", broken)
        assert _exit_code([]) == exit_codes.UNEXPECTED_ERROR
        assert "ValueError" in capsys.readouterr().err
