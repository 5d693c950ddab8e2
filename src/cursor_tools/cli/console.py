"""CLI console helpers with optional Rich support.

Diagnostics always go to stderr; stdout is reserved for streamed command
output.  A Rich console is created per call so that redirected or
captured streams are honoured.
"""

from __future__ import annotations

import sys
from typing import Any

from cursor_tools.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def _escape(text: str) -> str:
	try:
		from rich.markup import escape
	except ModuleNotFoundError:
		return text
	return escape(text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects, soft_wrap=True)

	def _styled(self, style: str, label: str, message: str) -> None:
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(f"{label} {message}" if label else message, file=sys.stderr)
			return
		if not style:
			rich_console.print(_escape(message), soft_wrap=True)
			return
		prefix = f"[bold {style}]{label}[/bold {style}] " if label else ""
		rich_console.print(f"{prefix}[{style}]{_escape(message)}[/{style}]", soft_wrap=True)

	def info(self, message: str) -> None:
		"""Plain diagnostic line."""
		self._styled("", "", message)

	def warn(self, message: str) -> None:
		"""Yellow advisory line."""
		self._styled("yellow", "Warning:", message)

	def error(self, message: str) -> None:
		"""Red error line."""
		self._styled("red", "Error:", message)

	def hint(self, message: str) -> None:
		"""Yellow hint shown under an error."""
		self._styled("yellow", "Hint:", message)


console = _ConsoleProxy()
