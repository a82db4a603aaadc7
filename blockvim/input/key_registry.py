"""Reusable key-binding registry primitives."""

from __future__ import annotations

from dataclasses import dataclass

from .keys import KeyEvent


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more keys plus modifier predicates to a command.

    Keys are matched case-insensitively against the event's logical key
    unless ``exact`` is set (``?`` and ``/`` depend on the keyboard layout, so
    they are matched as typed). A modifier predicate of ``None`` means the
    binding does not care about that modifier.
    """

    keys: tuple[str, ...]
    command: str
    args: tuple[object, ...] = ()
    shift: bool | None = None
    ctrl: bool | None = None
    alt: bool | None = None
    meta: bool | None = None
    exact: bool = False

    @property
    def specificity(self) -> int:
        """Number of modifier predicates the binding constrains."""
        return sum(flag is not None for flag in (self.shift, self.ctrl, self.alt, self.meta))

    def matches(self, event: KeyEvent) -> bool:
        """Return whether ``event`` has a bound key and satisfies every predicate."""
        key = event.key if self.exact else event.lower
        if key not in self.keys:
            return False
        for wanted, actual in (
            (self.shift, event.shift),
            (self.ctrl, event.ctrl),
            (self.alt, event.alt),
            (self.meta, event.meta),
        ):
            if wanted is not None and wanted != actual:
                return False
        return True


class KeyBindingRegistry:
    """Ordered single-key dispatch table.

    Bindings are tried most specific first (most modifier predicates), then
    in registration order, so a general binding never shadows a specific one
    registered after it.
    """

    def __init__(self) -> None:
        self._bindings: list[KeyBinding] = []
        self._ordered: list[KeyBinding] | None = None

    def register_binding(self, binding: KeyBinding) -> KeyBindingRegistry:
        """Register one binding and return ``self``."""
        self._bindings.append(binding)
        self._ordered = None
        return self

    def register_bindings(self, *bindings: KeyBinding) -> KeyBindingRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def bindings(self) -> list[KeyBinding]:
        """Bindings in match order."""
        if self._ordered is None:
            self._ordered = sorted(self._bindings, key=lambda binding: -binding.specificity)
        return self._ordered

    def match(self, event: KeyEvent) -> KeyBinding | None:
        """Return the first binding matching ``event``, if any."""
        for binding in self.bindings():
            if binding.matches(event):
                return binding
        return None

    def __len__(self) -> int:
        return len(self._bindings)
