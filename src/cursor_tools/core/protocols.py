"""Protocols (interfaces) consumed by the core layer.

The execution engine depends only on :class:`Command`, never on a
concrete command class.  Any object with the right attributes satisfies
it structurally.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from cursor_tools.core.options import Options


class Command(Protocol):
    """Contract shared by every entry in the command registry.

    Attributes
    ----------
    accepts_empty_query:
        Whether the command may run with no query text at all.
    default_query:
        Substituted when the query is empty, or ``None`` for no default.
    """

    accepts_empty_query: bool
    default_query: str | None

    def execute(self, query: str, options: Options) -> Iterator[str]:
        """Yield text chunks in the order they should be shown.

        Implementations must not raise: internal failures are turned
        into a final human-readable error chunk.  The engine only asks
        for the next chunk after it has fully handled the current one.
        """
        ...  # pragma: no cover
