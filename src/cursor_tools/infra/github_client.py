"""GitHub REST client used by the ``github`` and ``doc`` commands.

The only module that talks to api.github.com.  httpx errors and non-2xx
responses are mapped to :class:`ProviderError`.
"""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Any

import httpx

from cursor_tools.exceptions import ProviderError

API_URL = "https://api.github.com"

_REPO_PATTERNS = (
    re.compile(r"^(?:https?://)?(?:www\.)?github\.com/([\w.-]+)/([\w.-]+?)(?:\.git)?/?$"),
    re.compile(r"^git@github\.com:([\w.-]+)/([\w.-]+?)(?:\.git)?$"),
    re.compile(r"^([\w.-]+)/([\w.-]+)$"),
)


def parse_repo(spec: str) -> str:
    """Normalise ``owner/repo``, a GitHub URL or an SSH remote to ``owner/repo``.

    Raises
    ------
    ProviderError
        When *spec* is not recognisable as a GitHub repository.
    """
    spec = spec.strip()
    for pattern in _REPO_PATTERNS:
        match = pattern.match(spec)
        if match:
            return f"{match.group(1)}/{match.group(2)}"
    raise ProviderError(
        f"'{spec}' is not a GitHub repository.",
        hint="Use owner/repo or https://github.com/owner/repo",
    )


def detect_repo(cwd: Path | None = None) -> str:
    """Read ``owner/repo`` from the ``origin`` remote of the git checkout at *cwd*."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ProviderError(
            "Could not determine the GitHub repository from git.",
            hint="Run inside a clone with an 'origin' remote, or pass --from-github owner/repo",
        ) from exc
    return parse_repo(result.stdout)


class GitHubClient:
    """Thin wrapper over the endpoints the commands need."""

    def __init__(
        self,
        token: str | None = None,
        *,
        client: httpx.Client | None = None,
        base_url: str = API_URL,
    ) -> None:
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.Client(timeout=30.0, follow_redirects=True)
        self._client.headers.update(headers)
        self._base_url = base_url.rstrip("/")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, path: str, **params: Any) -> httpx.Response:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            response = self._client.get(url, params=params or None)
        except httpx.HTTPError as exc:
            raise ProviderError(f"GitHub request failed: {exc}") from exc
        if response.status_code == 404:
            raise ProviderError(f"GitHub resource not found: {path}")
        if response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0":
            raise ProviderError(
                "GitHub API rate limit exceeded.",
                hint="Set GITHUB_TOKEN to raise the limit.",
            )
        if response.status_code >= 400:
            raise ProviderError(f"GitHub API error ({response.status_code}): {response.text}")
        return response

    def _json(self, path: str, **params: Any) -> Any:
        return self._get(path, **params).json()

    # ------------------------------------------------------------------
    # Pull requests / issues
    # ------------------------------------------------------------------

    def list_pull_requests(self, repo: str, *, limit: int = 10) -> list[dict[str, Any]]:
        return list(self._json(f"repos/{repo}/pulls", state="open", per_page=limit))

    def get_pull_request(self, repo: str, number: int) -> dict[str, Any]:
        return dict(self._json(f"repos/{repo}/pulls/{number}"))

    def list_issues(self, repo: str, *, limit: int = 10) -> list[dict[str, Any]]:
        # The issues endpoint also returns pull requests.
        issues = self._json(f"repos/{repo}/issues", state="open", per_page=limit)
        return [issue for issue in issues if "pull_request" not in issue]

    def get_issue(self, repo: str, number: int) -> dict[str, Any]:
        return dict(self._json(f"repos/{repo}/issues/{number}"))

    def list_comments(self, repo: str, number: int) -> list[dict[str, Any]]:
        return list(self._json(f"repos/{repo}/issues/{number}/comments"))

    # ------------------------------------------------------------------
    # Archives
    # ------------------------------------------------------------------

    def download_zipball(self, repo: str, *, max_bytes: int) -> bytes:
        """Download the default branch of *repo* as a zip archive.

        Raises
        ------
        ProviderError
            When the archive exceeds *max_bytes* or the download fails.
        """
        url = f"{self._base_url}/repos/{repo}/zipball"
        chunks: list[bytes] = []
        received = 0
        try:
            with self._client.stream("GET", url) as response:
                if response.status_code >= 400:
                    response.read()
                    raise ProviderError(
                        f"Could not download {repo} ({response.status_code}): {response.text}",
                    )
                for data in response.iter_bytes():
                    received += len(data)
                    if received > max_bytes:
                        raise ProviderError(
                            f"Repository {repo} is larger than {max_bytes // (1024 * 1024)} MB.",
                            hint="Raise doc.maxRepoSizeMB in cursor-tools.config.json",
                        )
                    chunks.append(data)
        except httpx.HTTPError as exc:
            raise ProviderError(f"GitHub download failed: {exc}") from exc
        return b"".join(chunks)
