"""Package version, read from the installed distribution's metadata."""

from __future__ import annotations

from importlib import metadata

PACKAGE_NAME = "cursor-tools"


def read_version() -> str:
    """Return the installed version.

    Raises
    ------
    importlib.metadata.PackageNotFoundError
        When the distribution metadata cannot be found.
    """
    return metadata.version(PACKAGE_NAME)


def get_version() -> str:
    """Like :func:`read_version`, but ``"unknown"`` instead of raising."""
    try:
        return read_version()
    except metadata.PackageNotFoundError:
        return "unknown"


__version__: str = get_version()
