"""``cursor-tools install [dir]``: add cursor-tools guidance to ``.cursorrules``."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from cursor_tools.commands.base import BaseCommand
from cursor_tools.core.options import Options
from cursor_tools.infra.cursor_rules import install_rules
from cursor_tools.version import get_version


class InstallCommand(BaseCommand):
    name = "install"
    default_query = "."

    def run(self, query: str, options: Options) -> Iterator[str]:
        target = Path(query or self.default_query).expanduser()
        yield f"Installing cursor-tools rules in {target.resolve()}...\n"
        path, existed = install_rules(target, get_version())
        yield f"{'Updated' if existed else 'Created'} {path}\n"
