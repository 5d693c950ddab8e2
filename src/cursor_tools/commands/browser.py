"""``cursor-tools browser open <url>``: drive a real browser page.

Only the ``open`` action is supported.  The URL comes from the query or
``--url``; what is captured is controlled by the browser flags, with
unset flags falling back to the ``browser`` config section.
"""

from __future__ import annotations

from collections.abc import Iterator

from cursor_tools.commands.base import BaseCommand
from cursor_tools.config import Config
from cursor_tools.core.options import Options
from cursor_tools.exceptions import ProviderError
from cursor_tools.infra.browser_driver import PageRequest, PlaywrightDriver, parse_viewport

ACTIONS = ("open",)


def _resolve_url(query: str, options: Options) -> str:
    words = query.split()
    if words and words[0].lower() in ACTIONS:
        words = words[1:]
    elif words:
        raise ProviderError(
            f"Unknown browser action '{words[0]}'.",
            hint="Use: browser open <url>",
        )
    url = options.url or (words[0] if words else "")
    if not url:
        raise ProviderError("No URL given.", hint="Use: browser open <url>, or --url <url>")
    if "://" not in url:
        url = f"https://{url}"
    return url


def build_request(query: str, options: Options, config: Config) -> PageRequest:
    """Merge flags over the ``browser`` config section."""
    settings = config.browser
    return PageRequest(
        url=_resolve_url(query, options),
        headless=settings.headless if options.headless is None else options.headless,
        viewport=parse_viewport(options.viewport or settings.default_viewport),
        timeout_ms=options.timeout or settings.timeout,
        connect_to=options.connect_to,
        capture_console=options.console is not False,
        capture_network=options.network is not False,
        html=bool(options.html),
        text=bool(options.text),
        selector=options.selector,
        wait=options.wait,
        evaluate=options.evaluate,
        screenshot=options.screenshot,
        video_dir=options.video,
        debug=bool(options.debug),
    )


class BrowserCommand(BaseCommand):
    name = "browser"

    def __init__(self, *, config: Config | None = None, driver: PlaywrightDriver | None = None) -> None:
        super().__init__(config=config)
        self._driver = driver or PlaywrightDriver()

    def run(self, query: str, options: Options) -> Iterator[str]:
        request = build_request(query, options, self.config)
        yield from self._driver.open(request)
