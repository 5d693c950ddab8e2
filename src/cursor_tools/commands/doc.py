"""``cursor-tools doc``: generate documentation for a repository.

Documents the working directory, or a remote repository when
``--from-github`` is given.  The query is optional and, when present,
narrows what the documentation should focus on.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from cursor_tools.commands.base import BaseCommand
from cursor_tools.commands.repo import gemini_provider
from cursor_tools.config import Config
from cursor_tools.core.options import Options
from cursor_tools.exceptions import ProviderError
from cursor_tools.infra.github_client import GitHubClient, parse_repo
from cursor_tools.infra.llm_providers import GeminiProvider
from cursor_tools.infra.repo_packer import pack_directory, pack_zip

DOC_PROMPT = (
    "You are an expert technical writer. Generate comprehensive documentation "
    "for the repository below: its purpose, architecture, public APIs, "
    "configuration and usage examples. Format the result as Markdown."
)


def build_prompt(query: str, hint: str | None) -> str:
    prompt = DOC_PROMPT
    if query:
        prompt += f"\n\nFocus on: {query}"
    if hint:
        prompt += f"\n\nAdditional guidance: {hint}"
    return prompt


class DocCommand(BaseCommand):
    name = "doc"
    accepts_empty_query = True

    def __init__(
        self,
        *,
        config: Config | None = None,
        provider: GeminiProvider | None = None,
        github: GitHubClient | None = None,
        root: Path | None = None,
    ) -> None:
        super().__init__(config=config)
        self._provider = provider
        self._github = github
        self._root = root

    def _pack_remote(self, spec: str, max_bytes: int) -> str:
        repo = parse_repo(spec)
        client = self._github or GitHubClient(os.environ.get("GITHUB_TOKEN"))
        try:
            archive = client.download_zipball(repo, max_bytes=max_bytes)
        finally:
            if self._github is None:
                client.close()
        return pack_zip(archive, max_bytes=max_bytes)

    def run(self, query: str, options: Options) -> Iterator[str]:
        settings = self.config.gemini
        provider = self._provider or gemini_provider(self.config)
        max_bytes = self.config.doc.max_repo_size_mb * 1024 * 1024

        if options.from_github:
            yield f"Fetching {options.from_github} from GitHub...\n"
            context = self._pack_remote(options.from_github, max_bytes)
        else:
            yield "Packing repository...\n"
            context = pack_directory(self._root or Path.cwd(), max_bytes=max_bytes)

        model = options.model or settings.model
        yield f"Generating documentation with {model}...\n\n"

        parts: list[str] = []
        for text in provider.stream(
            [context, build_prompt(query, options.hint)],
            model=model,
            max_tokens=options.max_tokens or settings.max_tokens,
        ):
            parts.append(text)
            yield text

        if options.output:
            target = Path(options.output)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text("".join(parts), encoding="utf-8")
            except OSError as exc:
                raise ProviderError(f"Could not write documentation to {target}: {exc}") from exc
            yield f"\n\nDocumentation written to {target}\n"
