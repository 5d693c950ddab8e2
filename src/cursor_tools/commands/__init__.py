"""Command registry.

Built once at import time and exposed read-only.  Constructing a command
performs no I/O; configuration is loaded lazily when a command runs.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from cursor_tools.commands.base import BaseCommand
from cursor_tools.commands.browser import BrowserCommand
from cursor_tools.commands.doc import DocCommand
from cursor_tools.commands.github import GithubCommand
from cursor_tools.commands.install import InstallCommand
from cursor_tools.commands.repo import RepoCommand
from cursor_tools.commands.web import WebCommand
from cursor_tools.core.protocols import Command

COMMANDS: Mapping[str, Command] = MappingProxyType(
    {
        "web": WebCommand(),
        "repo": RepoCommand(),
        "install": InstallCommand(),
        "doc": DocCommand(),
        "github": GithubCommand(),
        "browser": BrowserCommand(),
    }
)

__all__: list[str] = [
    "COMMANDS",
    "BaseCommand",
    "BrowserCommand",
    "DocCommand",
    "GithubCommand",
    "InstallCommand",
    "RepoCommand",
    "WebCommand",
]
