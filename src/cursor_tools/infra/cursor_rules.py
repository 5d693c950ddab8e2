"""Read and write the cursor-tools block inside ``.cursorrules``.

The block is delimited by ``<cursor-tools Integration>`` tags and carries a
``cursor-tools version`` marker so that stale installs can be detected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from cursor_tools.exceptions import ProviderError

RULES_FILENAME = ".cursorrules"
START_TAG = "<cursor-tools Integration>"
END_TAG = "</cursor-tools Integration>"

_BLOCK = re.compile(re.escape(START_TAG) + r".*?" + re.escape(END_TAG), re.DOTALL)
_VERSION = re.compile(r"<!--\s*cursor-tools version\s+(\S+)\s*-->")

RULES_BODY = """\
Use the following commands to get AI assistance:

**Web Search:**
`cursor-tools web "<your question>"` - Get answers from the web (Perplexity)

**Repository Context:**
`cursor-tools repo "<your question>"` - Get context-aware answers about this repository (Gemini)

**Documentation Generation:**
`cursor-tools doc [options]` - Generate comprehensive documentation for this repository
`cursor-tools doc --from-github <owner/repo>` - Document a remote GitHub repository

**GitHub Information:**
`cursor-tools github pr [number]` - Get open PRs, or a specific PR with comments
`cursor-tools github issue [number]` - Get open issues, or a specific issue with comments

**Browser Automation:**
`cursor-tools browser open <url> [options]` - Open a URL and capture page content, console logs and network activity

**Options:**
--model <model name>: Use a specific model
--max-tokens <number>: Cap the response length
--save-to <file path>: Also save the streamed output to a file
--hint <hint>: Extra guidance for documentation generation
"""


@dataclass(frozen=True, slots=True)
class RulesCheck:
    """Outcome of :func:`check_cursor_rules`."""

    kind: str
    """``"success"`` or ``"error"``."""

    needs_update: bool = False
    message: str | None = None


def render_block(version: str) -> str:
    return f"{START_TAG}\n<!-- cursor-tools version {version} -->\n{RULES_BODY}{END_TAG}"


def check_cursor_rules(directory: Path, version: str) -> RulesCheck:
    """Compare the installed block in *directory* against *version*."""
    path = directory / RULES_FILENAME
    if not path.exists():
        return RulesCheck(
            "success",
            needs_update=True,
            message=f"No {RULES_FILENAME} file found. Run `cursor-tools install .` to set it up.",
        )
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return RulesCheck("error", message=f"Could not read {path}: {exc}")

    block = _BLOCK.search(content)
    if block is None:
        return RulesCheck(
            "success",
            needs_update=True,
            message=f"cursor-tools section missing from {RULES_FILENAME}. Run `cursor-tools install .` to add it.",
        )
    found = _VERSION.search(block.group(0))
    installed = found.group(1) if found else None
    if installed != version:
        return RulesCheck(
            "success",
            needs_update=True,
            message=(
                f"{RULES_FILENAME} was written by cursor-tools {installed or 'unknown'}; "
                f"current is {version}. Run `cursor-tools install .` to update it."
            ),
        )
    return RulesCheck("success")


def install_rules(directory: Path, version: str) -> tuple[Path, bool]:
    """Write or refresh the cursor-tools block in *directory*'s rules file.

    Returns the file path and whether it already existed.

    Raises
    ------
    ProviderError
        When the directory is missing or the file cannot be written.
    """
    if not directory.is_dir():
        raise ProviderError(f"{directory} is not a directory.")
    path = directory / RULES_FILENAME
    block = render_block(version)
    try:
        existed = path.exists()
        content = path.read_text(encoding="utf-8") if existed else ""
        if _BLOCK.search(content):
            content = _BLOCK.sub(lambda _m: block, content, count=1)
        else:
            content = f"{content.rstrip()}\n\n{block}\n" if content.strip() else f"{block}\n"
        path.write_text(content, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProviderError(f"Could not update {path}: {exc}") from exc
    return path, existed
