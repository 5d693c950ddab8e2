"""Infrastructure layer: HTTP services, git, the file system and browsers.

Every raw third-party exception is caught here and re-raised as a
:class:`~cursor_tools.exceptions.CursorToolsError` subclass.

Rules
-----
* No imports from ``cli`` or ``commands``.
* No user-facing output.
"""
