"""Core layer: option table, flag parser and execution engine.

Rules
-----
* No imports from ``cli``, ``commands`` or ``infra``.
* No ``print()``; the engine writes only to streams it is given.
"""

from cursor_tools.core.engine import ExecutionEngine
from cursor_tools.core.options import OPTION_TABLE, OptionKey, OptionKind, Options
from cursor_tools.core.parser import ParsedArgs, parse_args
from cursor_tools.core.protocols import Command
from cursor_tools.core.sink import FileSink, OutputSink

__all__: list[str] = [
    "OPTION_TABLE",
    "Command",
    "ExecutionEngine",
    "FileSink",
    "OptionKey",
    "OptionKind",
    "Options",
    "OutputSink",
    "ParsedArgs",
    "parse_args",
]
