"""``cursor-tools repo``: repository-aware answers from Gemini.

The working directory is packed into one document and sent along with
the project's ``.cursorrules`` and the user's question.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from cursor_tools.commands.base import BaseCommand
from cursor_tools.config import Config, require_env
from cursor_tools.core.options import Options
from cursor_tools.infra.cursor_rules import RULES_FILENAME
from cursor_tools.infra.llm_providers import GeminiProvider
from cursor_tools.infra.repo_packer import pack_directory


def read_rules(directory: Path) -> str:
    """Contents of the project's rules file, or ``""`` if there is none."""
    path = directory / RULES_FILENAME
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8", errors="replace")


def gemini_provider(config: Config) -> GeminiProvider:
    return GeminiProvider(require_env("GEMINI_API_KEY"), base_url=config.gemini.base_url)


class RepoCommand(BaseCommand):
    name = "repo"

    def __init__(
        self,
        *,
        config: Config | None = None,
        provider: GeminiProvider | None = None,
        root: Path | None = None,
    ) -> None:
        super().__init__(config=config)
        self._provider = provider
        self._root = root

    def run(self, query: str, options: Options) -> Iterator[str]:
        root = self._root or Path.cwd()
        settings = self.config.gemini
        provider = self._provider or gemini_provider(self.config)

        yield "Packing repository...\n"
        context = pack_directory(root, max_bytes=self.config.doc.max_repo_size_mb * 1024 * 1024)

        model = options.model or settings.model
        yield f"Querying {model}...\n"
        yield from provider.stream(
            [read_rules(root), context, query],
            model=model,
            max_tokens=options.max_tokens or settings.max_tokens,
        )
