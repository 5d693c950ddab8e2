"""Shared base for every registered command.

:meth:`BaseCommand.execute` is the command's error boundary: whatever
:meth:`run` raises is turned into a final error chunk, so a failing
command still ends its stream cleanly and keeps the output produced so far.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import ClassVar

from cursor_tools.config import Config, load_config, load_env
from cursor_tools.core.options import Options


def error_chunk(exc: Exception) -> str:
    """Render *exc* as the text a command yields instead of raising."""
    chunk = f"\nError: {exc}\n"
    hint = getattr(exc, "hint", None)
    if hint:
        chunk += f"Hint: {hint}\n"
    return chunk


class BaseCommand(ABC):
    """Base class satisfying :class:`~cursor_tools.core.protocols.Command`.

    Parameters
    ----------
    config:
        Explicit configuration.  When ``None`` the env and config files
        are loaded lazily on first use, so building the registry stays
        free of I/O.
    """

    name: ClassVar[str]
    accepts_empty_query: ClassVar[bool] = False
    default_query: ClassVar[str | None] = None

    def __init__(self, *, config: Config | None = None) -> None:
        self._config = config

    @property
    def config(self) -> Config:
        if self._config is None:
            load_env()
            self._config = load_config()
        return self._config

    def execute(self, query: str, options: Options) -> Iterator[str]:
        try:
            yield from self.run(query, options)
        except Exception as exc:  # noqa: BLE001
            yield error_chunk(exc)

    @abstractmethod
    def run(self, query: str, options: Options) -> Iterator[str]:
        """Produce the command's chunks; may raise."""
