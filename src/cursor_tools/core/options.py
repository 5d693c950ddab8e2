"""Option table and the immutable :class:`Options` record.

The table is the single source of truth for every accepted flag.  Each
:class:`OptionKey` carries one canonical camelCase spelling; the kebab-case
spelling shown to users and the snake_case attribute on :class:`Options`
are both derived from it.  Any spelling of a flag is resolved through
:func:`normalize_flag_name`, a pure function: lowercase, hyphens removed.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any


_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_kebab_case(name: str) -> str:
    """``maxTokens`` -> ``max-tokens``."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


def normalize_flag_name(name: str) -> str:
    """Collapse kebab-case and camelCase spellings to one lookup key.

    ``max-tokens``, ``maxTokens`` and ``MAX-TOKENS`` all become
    ``maxtokens``.
    """
    return name.lower().replace("-", "")


# ---------------------------------------------------------------------------
# Option keys
# ---------------------------------------------------------------------------

class OptionKind(Enum):
    """Value kind of a flag."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class OptionKey(str, Enum):
    """Every recognised flag, by canonical spelling."""

    MODEL = "model"
    MAX_TOKENS = "maxTokens"
    FROM_GITHUB = "fromGithub"
    OUTPUT = "output"
    SAVE_TO = "saveTo"
    HINT = "hint"
    URL = "url"
    SCREENSHOT = "screenshot"
    VIEWPORT = "viewport"
    SELECTOR = "selector"
    WAIT = "wait"
    VIDEO = "video"
    EVALUATE = "evaluate"
    CONSOLE = "console"
    HTML = "html"
    NETWORK = "network"
    HEADLESS = "headless"
    TEXT = "text"
    DEBUG = "debug"
    CONNECT_TO = "connectTo"
    TIMEOUT = "timeout"

    @property
    def kind(self) -> OptionKind:
        return _KINDS.get(self, OptionKind.STRING)

    @property
    def is_boolean(self) -> bool:
        return self.kind is OptionKind.BOOLEAN

    @property
    def is_numeric(self) -> bool:
        return self.kind is OptionKind.NUMBER

    @property
    def flag(self) -> str:
        """User-facing spelling, e.g. ``--max-tokens``."""
        return f"--{to_kebab_case(self.value)}"

    @property
    def field_name(self) -> str:
        """Attribute name on :class:`Options`, e.g. ``max_tokens``."""
        return to_kebab_case(self.value).replace("-", "_")


_KINDS: Mapping[OptionKey, OptionKind] = MappingProxyType(
    {
        OptionKey.MAX_TOKENS: OptionKind.NUMBER,
        OptionKey.TIMEOUT: OptionKind.NUMBER,
        OptionKey.CONNECT_TO: OptionKind.NUMBER,
        OptionKey.CONSOLE: OptionKind.BOOLEAN,
        OptionKey.HTML: OptionKind.BOOLEAN,
        OptionKey.NETWORK: OptionKind.BOOLEAN,
        OptionKey.HEADLESS: OptionKind.BOOLEAN,
        OptionKey.TEXT: OptionKind.BOOLEAN,
        OptionKey.DEBUG: OptionKind.BOOLEAN,
    }
)

OPTION_TABLE: Mapping[str, OptionKey] = MappingProxyType(
    {normalize_flag_name(key.value): key for key in OptionKey}
)
"""Normalized flag name -> :class:`OptionKey`."""


def lookup_option(name: str) -> OptionKey | None:
    """Resolve any spelling of a flag name (without ``--``) to its key."""
    return OPTION_TABLE.get(normalize_flag_name(name))


def valid_flags() -> list[str]:
    """All accepted flags in canonical kebab-case, in table order."""
    return [key.flag for key in OptionKey]


# ---------------------------------------------------------------------------
# Options record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Options:
    """One optional value per :class:`OptionKey`; ``None`` means unset.

    Built once by the argument parser and read-only afterwards.
    """

    model: str | None = None
    max_tokens: int | None = None
    from_github: str | None = None
    output: str | None = None
    save_to: str | None = None
    hint: str | None = None
    url: str | None = None
    screenshot: str | None = None
    viewport: str | None = None
    selector: str | None = None
    wait: str | None = None
    video: str | None = None
    evaluate: str | None = None
    console: bool | None = None
    html: bool | None = None
    network: bool | None = None
    headless: bool | None = None
    text: bool | None = None
    debug: bool | None = None
    connect_to: int | None = None
    timeout: int | None = None

    @classmethod
    def from_values(cls, values: Mapping[OptionKey, Any]) -> Options:
        return cls(**{key.field_name: value for key, value in values.items()})

    def get(self, key: OptionKey) -> Any:
        return getattr(self, key.field_name)

    def as_dict(self) -> dict[OptionKey, Any]:
        """Only the keys that were set."""
        return {
            key: self.get(key)
            for key in OptionKey
            if self.get(key) is not None
        }
