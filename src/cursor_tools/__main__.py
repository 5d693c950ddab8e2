"""Allow ``python -m cursor_tools`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m cursor_tools`` behaves identically to the ``cursor-tools``
console script.
"""

from __future__ import annotations

from cursor_tools.cli.app import cli

if __name__ == "__main__":
    cli()
