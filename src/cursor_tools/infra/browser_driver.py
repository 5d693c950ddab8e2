"""Playwright-backed page driver for the ``browser`` command.

Playwright is an optional dependency; it is imported only when a page is
actually opened.  Playwright exceptions are re-raised as
:class:`ProviderError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from cursor_tools.exceptions import EnvironmentError, ProviderError

_VIEWPORT = re.compile(r"^\s*(\d+)\s*x\s*(\d+)\s*$", re.IGNORECASE)


def parse_viewport(value: str) -> tuple[int, int]:
    """``"1280x720"`` -> ``(1280, 720)``."""
    match = _VIEWPORT.match(value)
    if not match:
        raise ProviderError(
            f"Invalid viewport '{value}'.",
            hint="Use WIDTHxHEIGHT, e.g. --viewport 1280x720",
        )
    return int(match.group(1)), int(match.group(2))


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Everything needed to open one page and collect its output."""

    url: str
    headless: bool = True
    viewport: tuple[int, int] = (1280, 720)
    timeout_ms: int = 120000
    connect_to: int | None = None
    capture_console: bool = True
    capture_network: bool = True
    html: bool = False
    text: bool = False
    selector: str | None = None
    wait: str | None = None
    evaluate: str | None = None
    screenshot: str | None = None
    video_dir: str | None = None
    debug: bool = False


def _load_sync_api() -> Any:
    try:
        from playwright import sync_api
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "playwright is not installed.",
            hint="pip install 'cursor-tools[browser]' && playwright install chromium",
        ) from exc
    return sync_api


class PlaywrightDriver:
    """Opens pages in Chromium and yields what it observes."""

    def open(self, request: PageRequest) -> Iterator[str]:
        sync_api = _load_sync_api()
        try:
            with sync_api.sync_playwright() as pw:
                yield from self._session(pw, request)
        except sync_api.Error as exc:
            raise ProviderError(f"Browser error: {exc}") from exc

    def _session(self, pw: Any, request: PageRequest) -> Iterator[str]:
        width, height = request.viewport
        connected = request.connect_to is not None
        if request.debug:
            yield (
                f"[debug] headless={request.headless} viewport={width}x{height} "
                f"timeout={request.timeout_ms}ms\n"
            )
        if connected:
            yield f"Connecting to Chrome on port {request.connect_to}...\n"
            browser = pw.chromium.connect_over_cdp(f"http://localhost:{request.connect_to}")
            context = browser.contexts[0] if browser.contexts else browser.new_context()
        else:
            browser = pw.chromium.launch(headless=request.headless)
            context = browser.new_context(
                viewport={"width": width, "height": height},
                record_video_dir=request.video_dir,
            )

        console_lines: list[str] = []
        network_lines: list[str] = []
        try:
            page = context.new_page()
            page.set_default_timeout(request.timeout_ms)
            if request.capture_console:
                page.on("console", lambda msg: console_lines.append(f"[{msg.type}] {msg.text}"))
            if request.capture_network:
                page.on(
                    "response",
                    lambda resp: network_lines.append(f"{resp.request.method} {resp.url} {resp.status}"),
                )

            yield f"Opening {request.url}...\n"
            page.goto(request.url, timeout=request.timeout_ms)

            if request.wait:
                if request.wait.isdigit():
                    page.wait_for_timeout(int(request.wait))
                else:
                    page.wait_for_selector(request.wait)

            if request.evaluate:
                result = page.evaluate(request.evaluate)
                yield f"\n--- Evaluation result ---\n{result}\n"

            if request.html:
                html = page.inner_html(request.selector) if request.selector else page.content()
                yield f"\n--- Page HTML ---\n{html}\n"

            if request.text:
                yield f"\n--- Page text ---\n{page.inner_text(request.selector or 'body')}\n"

            if request.screenshot:
                page.screenshot(path=request.screenshot, full_page=True)
                yield f"\nScreenshot saved to {request.screenshot}\n"

            if request.capture_console:
                yield "\n--- Console messages ---\n"
                yield "".join(f"{line}\n" for line in console_lines) or "(none)\n"

            if request.capture_network:
                yield "\n--- Network responses ---\n"
                yield "".join(f"{line}\n" for line in network_lines) or "(none)\n"
        finally:
            if connected:
                browser.close()
            else:
                context.close()
                browser.close()

        if request.video_dir and not connected:
            yield f"\nVideo saved to {request.video_dir}\n"
