"""Argument parser for free-form ``--flag`` syntax.

A single left-to-right pass over the raw tokens.  Non-flag tokens are
collected as positionals; flags are resolved through the option table and
validated by kind.  Any malformed flag raises a :class:`FlagError` at once,
so a failed parse never yields a partial :class:`Options`.

Rules
-----
* ``--no-<name>`` sets a boolean key to ``False``.  If ``<name>`` is not
  boolean, the whole ``no-<name>`` is looked up as a literal flag name.
* ``--<name>`` sets a boolean key to ``True`` and consumes nothing else.
* ``--<name> <value>`` for every other key; the value may not itself
  start with ``--``.
* Numeric keys take a base-10 integer.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from cursor_tools.core.options import OptionKey, Options, lookup_option, valid_flags
from cursor_tools.exceptions import (
    InvalidFlagValueError,
    MissingFlagValueError,
    UnknownFlagError,
)

FLAG_PREFIX = "--"
NEGATION_PREFIX = "--no-"

_INTEGER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, slots=True)
class ParsedArgs:
    """Result of one parse pass."""

    options: Options
    positionals: tuple[str, ...]

    @property
    def query(self) -> str:
        """Positionals joined with single spaces."""
        return " ".join(self.positionals)


def is_flag(token: str) -> bool:
    return token.startswith(FLAG_PREFIX)


def parse_args(tokens: Sequence[str]) -> ParsedArgs:
    """Parse *tokens* into options and positionals.

    Raises
    ------
    UnknownFlagError
        A flag name does not resolve to any option.
    MissingFlagValueError
        A value-taking flag is last, or followed by another flag.
    InvalidFlagValueError
        A numeric flag's value is not an integer.
    """
    values: dict[OptionKey, Any] = {}
    positionals: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        if not is_flag(token):
            positionals.append(token)
            continue

        if token.startswith(NEGATION_PREFIX):
            negated = lookup_option(token[len(NEGATION_PREFIX):])
            if negated is not None and negated.is_boolean:
                values[negated] = False
                continue

        name = token[len(FLAG_PREFIX):]
        key = lookup_option(name)
        if key is None:
            raise UnknownFlagError(
                f"'{token}' is not a valid flag.",
                hint="Valid flags: " + ", ".join(valid_flags()),
            )

        if key.is_boolean:
            values[key] = True
            continue

        if i >= len(tokens) or is_flag(tokens[i]):
            raise MissingFlagValueError(f"'{token}' requires a value.")
        raw = tokens[i]
        i += 1

        values[key] = _coerce(key, raw) if key.is_numeric else raw

    return ParsedArgs(options=Options.from_values(values), positionals=tuple(positionals))


def _coerce(key: OptionKey, raw: str) -> int:
    """Parse a numeric flag value as a base-10 integer."""
    if not _INTEGER.fullmatch(raw.strip()):
        raise InvalidFlagValueError(
            f"{key.value} must be a number, got '{raw}'.",
            hint=f"Example: {key.flag} 100",
        )
    return int(raw.strip(), 10)
