"""Chord/sequence matching over a timed token buffer.

The buffer only survives between keys while it holds the start of a
multi-key binding (``g`` waiting for a second ``g``). Idle expiry is checked
lazily against the previous input's timestamp when the next key arrives, so
an abandoned partial sequence never fires anything.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from ..constants import SEQUENCE_TIMEOUT_SECONDS
from ..mode import Mode
from .key_registry import KeyBinding, KeyBindingRegistry
from .keys import KeyEvent, key_token


@dataclass(frozen=True)
class SequenceBinding:
    tokens: tuple[str, ...]
    command: str
    args: tuple[object, ...] = ()


@dataclass
class ModeKeymap:
    """Single-key and multi-key bindings live in one mode."""

    singles: KeyBindingRegistry = field(default_factory=KeyBindingRegistry)
    sequences: dict[tuple[str, ...], SequenceBinding] = field(default_factory=dict)

    def add_sequence(self, binding: SequenceBinding) -> ModeKeymap:
        """Register a multi-key binding and return ``self``."""
        self.sequences[binding.tokens] = binding
        return self

    def prefix_keys(self) -> set[str]:
        """First tokens of every multi-key binding."""
        return {tokens[0] for tokens in self.sequences}

    def continues_sequence(self, tokens: tuple[str, ...]) -> bool:
        """Return ``True`` when ``tokens`` is a proper prefix of some sequence."""
        size = len(tokens)
        return any(len(seq) > size and seq[:size] == tokens for seq in self.sequences)


@dataclass(frozen=True)
class Resolution:
    """A resolved key: a named command, or the deliberate pending no-op."""

    command: str | None
    args: tuple[object, ...] = ()

    @property
    def pending(self) -> bool:
        return self.command is None


PENDING = Resolution(None)


class SequenceMatcher:
    def __init__(
        self,
        keymaps: Mapping[Mode, ModeKeymap],
        timeout_seconds: float = SEQUENCE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.keymaps = keymaps
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self.buffer: list[str] = []
        self._last_input: float | None = None

    @property
    def sequence(self) -> str:
        return " ".join(self.buffer)

    def clear(self) -> None:
        """Drop the buffered tokens."""
        self.buffer.clear()
        self._last_input = None

    def _expire_idle(self, now: float) -> None:
        if self._last_input is not None and now - self._last_input > self.timeout_seconds:
            self.buffer.clear()

    def resolve(self, event: KeyEvent, mode: Mode) -> Resolution | None:
        """Feed one key and return what it resolved to.

        ``None`` means unmatched: the caller must leave the key alone.
        ``PENDING`` means the key was swallowed because a sequence is open.
        """
        now = self._clock()
        self._expire_idle(now)
        keymap = self.keymaps.get(mode)
        if keymap is None:
            self.clear()
            return None

        if event.is_escape:
            self.clear()
            return self._single(event, keymap)

        self.buffer.append(key_token(event))
        self._last_input = now
        tokens = tuple(self.buffer)

        binding = keymap.sequences.get(tokens)
        if binding is not None:
            self.clear()
            return Resolution(binding.command, binding.args)

        if tokens[0] in keymap.prefix_keys():
            # A prefix key suppresses its own single-key binding while open.
            if not keymap.continues_sequence(tokens):
                self.clear()
            return PENDING

        self.clear()
        return self._single(event, keymap)

    @staticmethod
    def _single(event: KeyEvent, keymap: ModeKeymap) -> Resolution | None:
        binding = keymap.singles.match(event)
        if binding is None:
            return None
        return Resolution(binding.command, binding.args)

    def binding_for(self, event: KeyEvent, mode: Mode) -> KeyBinding | None:
        """Return the single-key binding ``event`` would hit in ``mode``."""
        keymap = self.keymaps.get(mode)
        if keymap is None:
            return None
        return keymap.singles.match(event)
