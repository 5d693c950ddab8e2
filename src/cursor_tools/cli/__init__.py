"""CLI layer: usage, version, console output and the error boundary.

The outermost layer.  It may import from ``core``, ``commands`` and
``infra``; nothing else imports from ``cli``.
"""
