"""Key events and their canonical token encoding."""

from __future__ import annotations

from dataclasses import dataclass

SPACE_TOKEN = "space"


@dataclass(frozen=True)
class KeyEvent:
    """One key press as delivered by the host.

    ``key`` is the logical key identity (``"a"``, ``"G"``, ``"?"``,
    ``"Escape"``, ``"Enter"``, ``"Backspace"``, ``" "``).
    """

    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def lower(self) -> str:
        return self.key.lower()

    @property
    def is_escape(self) -> bool:
        return self.lower == "escape"

    @property
    def is_enter(self) -> bool:
        return self.lower == "enter"

    @property
    def is_backspace(self) -> bool:
        return self.lower == "backspace"

    @property
    def has_command_modifier(self) -> bool:
        """Ctrl, meta, or alt; shift alone only changes the character."""
        return self.ctrl or self.meta or self.alt


def key_token(event: KeyEvent) -> str:
    """Encode ``event`` as one sequence-buffer token.

    Modifiers are prefixed in the fixed order ``ctrl+``, ``cmd+``, ``alt+``.
    Shift on a lone printable character is folded into the character itself
    (``G``); in any other combination it becomes a ``shift+`` prefix.
    """
    key = event.key
    if key == " ":
        base = SPACE_TOKEN
    else:
        base = key.lower()

    prefix = ""
    if event.ctrl:
        prefix += "ctrl+"
    if event.meta:
        prefix += "cmd+"
    if event.alt:
        prefix += "alt+"
    if event.shift and len(key) == 1 and key != " " and not event.has_command_modifier:
        return key.upper() if key.isalpha() else key
    if event.shift:
        prefix += "shift+"
    return prefix + base
