"""Custom exception hierarchy for cursor-tools.

Every user-visible error condition maps to a subclass of
:class:`CursorToolsError` so the CLI error boundary can render a clean
message without leaking a stack trace.  Raw third-party exceptions (httpx,
playwright, ``OSError``) are caught where they happen and re-raised as one
of these.

Hierarchy
---------
CursorToolsError
├── UsageError
│   ├── UnknownCommandError
│   └── MissingQueryError
├── FlagError
│   ├── UnknownFlagError
│   ├── MissingFlagValueError
│   └── InvalidFlagValueError
├── SinkError
├── CommandError
├── ConfigError
├── ProviderError
└── EnvironmentError
"""

from __future__ import annotations


class CursorToolsError(Exception):
    """Base exception for all cursor-tools errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Invocation ------------------------------------------------------------

class UsageError(CursorToolsError):
    """Raised when the command line names no usable command or query."""


class UnknownCommandError(UsageError):
    """Raised when the command name is not in the registry."""


class MissingQueryError(UsageError):
    """Raised when a command that needs a query was given none."""


# --- Flags -----------------------------------------------------------------

class FlagError(CursorToolsError):
    """Raised by the argument parser for any malformed flag."""


class UnknownFlagError(FlagError):
    """Raised when a ``--flag`` does not resolve to a known option."""


class MissingFlagValueError(FlagError):
    """Raised when a value-taking flag is not followed by a value."""


class InvalidFlagValueError(FlagError):
    """Raised when a numeric flag receives a non-integer value."""


# --- Execution -------------------------------------------------------------

class SinkError(CursorToolsError):
    """Raised when the ``--save-to`` file cannot be prepared or written.

    Never fatal: the engine disables the file sink and keeps streaming.
    """


class CommandError(CursorToolsError):
    """Raised when a command's chunk production fails past its boundary."""


# --- Collaborators ---------------------------------------------------------

class ConfigError(CursorToolsError):
    """Raised when a configuration file exists but cannot be used."""


class ProviderError(CursorToolsError):
    """Raised when a remote service or local collaborator fails."""


class EnvironmentError(CursorToolsError):
    """Raised when a required runtime dependency is not available."""
