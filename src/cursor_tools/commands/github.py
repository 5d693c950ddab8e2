"""``cursor-tools github``: pull requests and issues as Markdown.

Usage::

    cursor-tools github pr            # open pull requests
    cursor-tools github pr 42         # one pull request with comments
    cursor-tools github issue [n]     # same for issues
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any

from cursor_tools.commands.base import BaseCommand
from cursor_tools.config import Config
from cursor_tools.core.options import Options
from cursor_tools.exceptions import ProviderError
from cursor_tools.infra.github_client import GitHubClient, detect_repo, parse_repo

SUBCOMMANDS = ("pr", "issue")


def _format_summary(item: dict[str, Any]) -> str:
    user = (item.get("user") or {}).get("login", "unknown")
    return f"- #{item.get('number')}: {item.get('title')} (@{user})\n  {item.get('html_url', '')}\n"


def _format_detail(kind: str, item: dict[str, Any], comments: list[dict[str, Any]]) -> Iterator[str]:
    user = (item.get("user") or {}).get("login", "unknown")
    yield f"# {kind} #{item.get('number')}: {item.get('title')}\n\n"
    yield f"Author: @{user} | State: {item.get('state')} | {item.get('html_url', '')}\n\n"
    yield (item.get("body") or "_No description._").rstrip() + "\n"
    if comments:
        yield f"\n## Comments ({len(comments)})\n"
        for comment in comments:
            author = (comment.get("user") or {}).get("login", "unknown")
            yield f"\n**@{author}** ({comment.get('created_at', '')}):\n{(comment.get('body') or '').rstrip()}\n"


class GithubCommand(BaseCommand):
    name = "github"

    def __init__(self, *, config: Config | None = None, client: GitHubClient | None = None) -> None:
        super().__init__(config=config)
        self._client = client

    def run(self, query: str, options: Options) -> Iterator[str]:
        words = query.split()
        sub = words[0].lower() if words else ""
        if sub not in SUBCOMMANDS:
            raise ProviderError(
                f"Unknown github subcommand '{sub}'.",
                hint="Use: github pr [number] | github issue [number]",
            )
        number: int | None = None
        if len(words) > 1:
            if not words[1].isdigit():
                raise ProviderError(f"'{words[1]}' is not a {sub} number.")
            number = int(words[1])

        repo = parse_repo(options.from_github) if options.from_github else detect_repo()
        client = self._client or GitHubClient(os.environ.get("GITHUB_TOKEN"))
        try:
            yield from self._render(client, repo, sub, number)
        finally:
            if self._client is None:
                client.close()

    def _render(self, client: GitHubClient, repo: str, sub: str, number: int | None) -> Iterator[str]:
        label = "Pull Request" if sub == "pr" else "Issue"
        if number is None:
            items = client.list_pull_requests(repo) if sub == "pr" else client.list_issues(repo)
            yield f"Open {label.lower()}s in {repo}:\n\n"
            if not items:
                yield "(none)\n"
            for item in items:
                yield _format_summary(item)
            return

        item = client.get_pull_request(repo, number) if sub == "pr" else client.get_issue(repo, number)
        yield from _format_detail(label, item, client.list_comments(repo, number))
