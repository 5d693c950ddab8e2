"""Shared pytest fixtures and configuration for the cursor-tools test suite.

Guidelines
----------
* No internet access in any test; HTTP goes through ``httpx.MockTransport``.
* No test depends on the real working directory or home directory.
* Commands under test are either stubs or real commands with injected
  collaborators.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest

from cursor_tools.config import Config
from cursor_tools.core.options import Options


class StubCommand:
    """Minimal :class:`~cursor_tools.core.protocols.Command` for engine/CLI tests.

    *chunks* may contain exceptions; they are raised when reached.
    """

    def __init__(
        self,
        chunks: Iterable[str | BaseException] = (),
        *,
        accepts_empty_query: bool = False,
        default_query: str | None = None,
        on_chunk: Callable[[int], None] | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.accepts_empty_query = accepts_empty_query
        self.default_query = default_query
        self.on_chunk = on_chunk
        self.calls: list[tuple[str, Options]] = []

    def execute(self, query: str, options: Options) -> Iterator[str]:
        self.calls.append((query, options))
        for index, chunk in enumerate(self.chunks):
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk
            if self.on_chunk is not None:
                self.on_chunk(index)


@pytest.fixture()
def stub_command() -> type[StubCommand]:
    return StubCommand


@pytest.fixture()
def config() -> Config:
    return Config()


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
