"""cursor-tools: stream AI-assisted answers about the web and your code.

A thin command-line front end: free-form flags are parsed, a named
command is looked up in a fixed registry, and its output is streamed to
the terminal (and optionally a file) chunk by chunk.
"""

from cursor_tools.version import __version__

__all__: list[str] = ["__version__"]
