"""Configuration for the concrete commands.

The first config file found wins and is merged over the defaults one
section at a time:

1. ``./cursor-tools.config.json``
2. ``~/.cursor-tools/config.json``

Secrets never live in these files.  They come from the environment,
optionally populated from ``./.cursor-tools.env`` or
``~/.cursor-tools/.env``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from cursor_tools.exceptions import ConfigError

CONFIG_FILENAME = "cursor-tools.config.json"
ENV_FILENAME = ".cursor-tools.env"
HOME_DIRNAME = ".cursor-tools"

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


@dataclass
class PerplexityConfig:
    model: str = "sonar-pro"
    max_tokens: int = 4000
    base_url: str = DEFAULT_PERPLEXITY_BASE_URL


@dataclass
class GeminiConfig:
    model: str = "gemini-1.5-pro"
    max_tokens: int = 10000
    base_url: str = DEFAULT_GEMINI_BASE_URL


@dataclass
class DocConfig:
    max_repo_size_mb: int = 100


@dataclass
class BrowserConfig:
    headless: bool = True
    default_viewport: str = "1280x720"
    # Milliseconds.
    timeout: int = 120000


@dataclass
class Config:
    """Canonical configuration object handed to every command."""

    perplexity: PerplexityConfig = field(default_factory=PerplexityConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    doc: DocConfig = field(default_factory=DocConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a config from the camelCase JSON layout.

        Unknown sections and keys are ignored so that newer config files
        keep working with older releases.
        """
        config = cls()
        for section in fields(cls):
            raw = data.get(section.name)
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raise ConfigError(f"Config section '{section.name}' must be an object.")
            current = getattr(config, section.name)
            known = {_camel(f.name): f.name for f in fields(current)}
            for key, value in raw.items():
                if key in known:
                    setattr(current, known[key], value)
        return config

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Config:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"Invalid JSON in {path}: {exc}",
                hint="Fix or remove the file to use the default configuration.",
            ) from exc
        except OSError as exc:
            raise ConfigError(f"Could not read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object.")
        return cls.from_dict(data)


def _camel(name: str) -> str:
    """``max_repo_size_mb`` -> ``maxRepoSizeMb``; ``MB`` is special-cased."""
    head, *rest = name.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    return camel.replace("SizeMb", "SizeMB")


def _candidates(cwd: Path | None, home: Path | None, local: str, home_name: str) -> list[Path]:
    cwd = cwd or Path.cwd()
    home = home or Path.home()
    return [cwd / local, home / HOME_DIRNAME / home_name]


def load_config(cwd: Path | None = None, home: Path | None = None) -> Config:
    """Load the first config file found, or the defaults."""
    for path in _candidates(cwd, home, CONFIG_FILENAME, "config.json"):
        if path.is_file():
            return Config.from_file(path)
    return Config()


def load_env(cwd: Path | None = None, home: Path | None = None) -> Path | None:
    """Load the first env file found into ``os.environ``.

    Variables already set in the environment are not overridden.
    Returns the file that was loaded, if any.
    """
    for path in _candidates(cwd, home, ENV_FILENAME, ".env"):
        if path.is_file():
            load_dotenv(path, override=False)
            return path
    return None


def require_env(name: str) -> str:
    """Return the value of environment variable *name* or raise ``ConfigError``."""
    value = os.environ.get(name)
    if not value:
        raise ConfigError(
            f"{name} environment variable is not set.",
            hint=f"Add {name}=... to {ENV_FILENAME} or ~/{HOME_DIRNAME}/.env",
        )
    return value
