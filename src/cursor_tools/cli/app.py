"""CLI application entry point and command routing for cursor-tools.

This module is the **sole error boundary** for the entire application.
It catches :class:`~cursor_tools.exceptions.CursorToolsError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, renders a short
message on stderr and returns a well-defined exit code.

Dispatch order
--------------
1. ``version`` / ``-v`` / ``--version`` short-circuit before any parsing.
2. All remaining tokens go through the flag parser; the first positional
   names the command and the rest form the query.
3. Registry lookup, query check, then the execution engine.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from importlib import metadata
from pathlib import Path

from cursor_tools.cli import exit_codes
from cursor_tools.cli.console import console
from cursor_tools.core.engine import ExecutionEngine
from cursor_tools.core.options import OptionKey, OptionKind
from cursor_tools.core.parser import parse_args
from cursor_tools.core.protocols import Command
from cursor_tools.exceptions import CursorToolsError, MissingQueryError, UnknownCommandError
from cursor_tools.version import PACKAGE_NAME, get_version, read_version

PROG = "cursor-tools"
VERSION_COMMANDS = frozenset({"version", "-v", "--version"})

# Commands that manage the rules file themselves skip the staleness check.
_SKIP_RULES_CHECK = frozenset({"install"})


# ---------------------------------------------------------------------------
# Usage / version
# ---------------------------------------------------------------------------

def _flag_usage(key: OptionKey) -> str:
    if key.kind is OptionKind.BOOLEAN:
        return f"[{key.flag}|--no-{key.flag[2:]}]"
    placeholder = "number" if key.kind is OptionKind.NUMBER else "value"
    return f"[{key.flag} <{placeholder}>]"


def usage_text(command_names: Sequence[str] = ()) -> str:
    """Usage message; every flag spelling comes from the option table."""
    lines = [
        f'Usage: {PROG} [options] <command> "<query>"',
        "",
        "Options:",
        *(f"  {_flag_usage(key)}" for key in OptionKey),
        "",
        "Note: options can be given in kebab-case (--max-tokens) or camelCase (--maxTokens).",
    ]
    if command_names:
        lines.insert(1, f"Commands: {', '.join(command_names)}")
    return "\n".join(lines)


def _handle_version() -> int:
    try:
        version = read_version()
    except metadata.PackageNotFoundError:
        console.error(f"Could not read the {PACKAGE_NAME} package version.")
        return exit_codes.GENERAL_ERROR
    print(f"{PROG} version {version}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Dispatch helpers
# ---------------------------------------------------------------------------

def _default_registry() -> Mapping[str, Command]:
    from cursor_tools.commands import COMMANDS

    return COMMANDS


def resolve_query(command: Command, name: str, tokens: Sequence[str]) -> str:
    """Join *tokens*, applying the command's default and empty-query policy."""
    query = " ".join(tokens)
    if not query and command.default_query is not None:
        query = command.default_query
    if not query and not command.accepts_empty_query:
        raise MissingQueryError(
            f"'{name}' requires a query.",
            hint=f'Example: {PROG} {name} "<query>"',
        )
    return query


def _check_rules() -> None:
    """Warn about a missing or outdated ``.cursorrules`` block."""
    from cursor_tools.infra.cursor_rules import check_cursor_rules

    result = check_cursor_rules(Path.cwd(), get_version())
    if result.kind == "error" and result.message:
        console.error(result.message)
    elif result.needs_update and result.message:
        console.warn(result.message)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None, *, registry: Mapping[str, Command] | None = None) -> int:
    """Run the cursor-tools CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    registry:
        Command registry override; the built-in registry by default.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    CursorToolsError
        Flag, usage and command errors; :func:`cli` maps them to exit 1.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if args and args[0] in VERSION_COMMANDS:
        return _handle_version()

    parsed = parse_args(args)
    commands = _default_registry() if registry is None else registry

    if not parsed.positionals:
        console.info(usage_text(list(commands)))
        return exit_codes.GENERAL_ERROR

    name, *query_tokens = parsed.positionals
    command = commands.get(name)
    if command is None:
        raise UnknownCommandError(
            f"'{name}' is not a valid command.",
            hint="Valid commands: " + ", ".join(commands),
        )

    query = resolve_query(command, name, query_tokens)

    if name not in _SKIP_RULES_CHECK:
        _check_rules()

    engine = ExecutionEngine(warn=console.warn, notify=console.info)
    engine.run(command, query, parsed.options)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: Sequence[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except CursorToolsError as exc:
        console.error(str(exc))
        if exc.hint:
            console.hint(exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
