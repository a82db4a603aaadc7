"""Public package surface for blockvim.

Exports :class:`Engine`, the modal key dispatcher, and ``main`` for
programmatic CLI invocation.
"""

from __future__ import annotations

from .engine import Engine
from .input import KeyEvent
from .mode import Mode


def main(*args, **kwargs):
    """Run the CLI entrypoint; the CLI module is imported on first call."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["Engine", "KeyEvent", "Mode", "main"]
