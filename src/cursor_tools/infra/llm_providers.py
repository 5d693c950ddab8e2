"""Streaming LLM providers backed by :mod:`httpx`.

Both providers speak server-sent events and yield text deltas as soon as
each event arrives, so the caller can forward them chunk by chunk.  Every
httpx failure is re-raised as :class:`ProviderError`; nothing raw escapes.
"""

from __future__ import annotations

import contextlib
import json
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

import httpx

from cursor_tools.exceptions import ProviderError

DEFAULT_TIMEOUT = httpx.Timeout(30.0, read=300.0)

WEB_SYSTEM_PROMPT = (
    "Search the web to produce answers to questions. Your responses are for use "
    "by an AI assistant, so be concise and include links to sources."
)


def iter_sse_data(lines: Iterable[str]) -> Iterator[str]:
    """Yield the ``data:`` payloads of an SSE stream until ``[DONE]``."""
    for line in lines:
        line = line.strip()
        if not line.startswith("data:"):
            continue
        payload = line[len("data:"):].strip()
        if payload == "[DONE]":
            return
        if payload:
            yield payload


def _decode(provider: str, payload: str) -> dict[str, Any]:
    try:
        event = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"{provider} sent a malformed event: {payload[:200]}") from exc
    if not isinstance(event, dict):
        raise ProviderError(f"{provider} sent an unexpected event: {payload[:200]}")
    if "error" in event:
        raise ProviderError(f"{provider} API error: {json.dumps(event['error'], indent=2)}")
    return event


class _StreamingProvider:
    """Shared request/stream plumbing."""

    name: str = "provider"

    def __init__(self, *, client: httpx.Client | None = None) -> None:
        self._client = client

    def _session(self) -> contextlib.AbstractContextManager[httpx.Client]:
        if self._client is not None:
            return contextlib.nullcontext(self._client)
        return httpx.Client(timeout=DEFAULT_TIMEOUT)

    def _stream_events(
        self,
        url: str,
        *,
        body: dict[str, Any],
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> Iterator[dict[str, Any]]:
        try:
            with self._session() as client:
                with client.stream("POST", url, json=body, headers=headers, params=params) as response:
                    if response.status_code >= 400:
                        response.read()
                        raise ProviderError(
                            f"{self.name} API error ({response.status_code}): {response.text}",
                        )
                    for payload in iter_sse_data(response.iter_lines()):
                        yield _decode(self.name, payload)
        except httpx.TimeoutException as exc:
            raise ProviderError(
                f"{self.name} request timed out.",
                hint="Try again, or lower --max-tokens.",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name} request failed: {exc}") from exc


class PerplexityProvider(_StreamingProvider):
    """Web-search answers from the Perplexity chat-completions API."""

    name = "Perplexity"

    def __init__(self, api_key: str, *, base_url: str, client: httpx.Client | None = None) -> None:
        super().__init__(client=client)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def stream(self, query: str, *, model: str, max_tokens: int) -> Iterator[str]:
        body = {
            "model": model,
            "messages": [
                {"role": "system", "content": WEB_SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "max_tokens": max_tokens,
            "stream": True,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        for event in self._stream_events(f"{self._base_url}/chat/completions", body=body, headers=headers):
            for choice in event.get("choices") or []:
                text = (choice.get("delta") or {}).get("content")
                if text:
                    yield text


class GeminiProvider(_StreamingProvider):
    """Long-context answers from a Gemini ``streamGenerateContent`` endpoint."""

    name = "Gemini"

    def __init__(self, api_key: str, *, base_url: str, client: httpx.Client | None = None) -> None:
        super().__init__(client=client)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def stream(self, parts: Sequence[str], *, model: str, max_tokens: int) -> Iterator[str]:
        """Send *parts* as one user turn and yield the reply text."""
        body = {
            "contents": [
                {"role": "user", "parts": [{"text": part} for part in parts if part]},
            ],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": 0.9,
                "topP": 0.8,
            },
        }
        url = f"{self._base_url}/{model}:streamGenerateContent"
        headers = {"x-goog-api-key": self._api_key}
        for event in self._stream_events(url, body=body, headers=headers, params={"alt": "sse"}):
            for candidate in event.get("candidates") or []:
                for part in (candidate.get("content") or {}).get("parts") or []:
                    text = part.get("text")
                    if text:
                        yield text
