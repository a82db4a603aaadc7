"""Interaction mode classification.

The mode is never stored. It is recomputed from ambient signals on every
dispatch, in a fixed priority order: search > hint > insert > visual >
normal. The signals can overlap for a tick during transitions, so the order
decides rather than whichever signal flipped last.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .constants import Selectors
from .host import ContentHost


class Mode(str, Enum):
    NORMAL = "NORMAL"
    INSERT = "INSERT"
    VISUAL = "VISUAL"
    HINT = "HINT"
    SEARCH = "SEARCH"


@dataclass(frozen=True)
class ModeSignals:
    """Snapshot of the four booleans the mode is derived from."""

    search_active: bool = False
    hint_active: bool = False
    editable_focused: bool = False
    highlight_present: bool = False


def classify_mode(signals: ModeSignals) -> Mode:
    """Map a signal snapshot to exactly one mode."""
    if signals.search_active:
        return Mode.SEARCH
    if signals.hint_active:
        return Mode.HINT
    if signals.editable_focused:
        return Mode.INSERT
    if signals.highlight_present:
        return Mode.VISUAL
    return Mode.NORMAL


class ModeResolver:
    """Reads live signals from the host and engine-owned overlays."""

    def __init__(
        self,
        host: ContentHost,
        *,
        search_active: Callable[[], bool],
        hint_active: Callable[[], bool],
    ) -> None:
        self.host = host
        self._search_active = search_active
        self._hint_active = hint_active

    def signals(self) -> ModeSignals:
        """Sample the current signals."""
        # The host's command bar is an input too, but typing there is not
        # editing a block.
        editable_focused = (
            self.host.active_editable() is not None
            and self.host.query(Selectors.command_bar) is None
        )
        return ModeSignals(
            search_active=self._search_active(),
            hint_active=self._hint_active(),
            editable_focused=editable_focused,
            highlight_present=self.host.query(Selectors.highlight) is not None,
        )

    def resolve(self) -> Mode:
        """Classify the current mode."""
        return classify_mode(self.signals())
