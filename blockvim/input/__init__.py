"""Input layer: key events, binding tables and the sequence matcher.

Single-key bindings carry modifier predicates; multi-key sequences are
matched on canonical tokens produced by :func:`key_token`.
"""

from .bindings import build_keymaps
from .key_registry import KeyBinding, KeyBindingRegistry
from .keys import KeyEvent, key_token
from .sequence import PENDING, ModeKeymap, Resolution, SequenceBinding, SequenceMatcher

__all__ = [
    "KeyBinding",
    "KeyBindingRegistry",
    "KeyEvent",
    "ModeKeymap",
    "PENDING",
    "Resolution",
    "SequenceBinding",
    "SequenceMatcher",
    "build_keymaps",
    "key_token",
]
