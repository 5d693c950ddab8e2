"""``cursor-tools web``: web search answers streamed from Perplexity."""

from __future__ import annotations

from collections.abc import Iterator

from cursor_tools.commands.base import BaseCommand
from cursor_tools.config import Config, require_env
from cursor_tools.core.options import Options
from cursor_tools.infra.llm_providers import PerplexityProvider


class WebCommand(BaseCommand):
    name = "web"

    def __init__(self, *, config: Config | None = None, provider: PerplexityProvider | None = None) -> None:
        super().__init__(config=config)
        self._provider = provider

    def _get_provider(self) -> PerplexityProvider:
        if self._provider is None:
            self._provider = PerplexityProvider(
                require_env("PERPLEXITY_API_KEY"),
                base_url=self.config.perplexity.base_url,
            )
        return self._provider

    def run(self, query: str, options: Options) -> Iterator[str]:
        settings = self.config.perplexity
        provider = self._get_provider()
        yield from provider.stream(
            query,
            model=options.model or settings.model,
            max_tokens=options.max_tokens or settings.max_tokens,
        )
