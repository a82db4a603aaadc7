"""Page-wide hint overlay with incremental narrowing.

A hint set is built fresh on every activation from the clickable elements
currently inside the viewport and thrown away on exit or selection. The
visible/hidden partition is always recomputed from the whole input buffer,
never patched incrementally, so backspace needs no snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..constants import HINT_CHARS, Selectors
from ..host import ContentHost, Element, InputSimulator, Overlay
from ..panels.geometry import in_viewport
from .labels import generate_hint_labels

LOGGER = logging.getLogger(__name__)


class NarrowResult(str, Enum):
    STILL_MATCHING = "still_matching"
    SELECTED = "selected"
    EXHAUSTED = "exhausted"


@dataclass
class HintEntry:
    """One labelled target. ``visible`` tracks narrowing, ``on_screen`` scrolling."""

    target: Element
    label: str
    marker: Any
    visible: bool = True
    on_screen: bool = True


class PageHints:
    """Page-wide hint mode: label, narrow, click, and follow scrolling."""

    def __init__(
        self,
        host: ContentHost,
        overlay: Overlay,
        simulator: InputSimulator,
        chars: str = HINT_CHARS,
    ) -> None:
        self.host = host
        self.overlay = overlay
        self.simulator = simulator
        self.chars = chars
        self.active = False
        self.entries: list[HintEntry] = []
        self.input_buffer = ""
        self.open_in_sidebar = False

    def clickable_targets(self) -> list[Element]:
        """Clickable elements with area that lie fully inside the viewport."""
        selector = ", ".join(Selectors.page_clickables)
        return [element for element in self.host.query_all(selector) if in_viewport(self.host, element)]

    def activate(
        self,
        targets: Sequence[Element] | None = None,
        *,
        open_in_sidebar: bool = False,
    ) -> list[HintEntry]:
        """Label ``targets`` (default: visible clickables) and enter hint mode."""
        self.deactivate()
        if targets is None:
            targets = self.clickable_targets()
        labels = generate_hint_labels(len(targets), self.chars)
        if len(labels) < len(targets):
            LOGGER.debug("Hinting %d of %d targets; label alphabet exhausted", len(labels), len(targets))

        self.entries = [
            HintEntry(target=target, label=label, marker=self.overlay.create_hint_marker(target, label.upper()))
            for target, label in zip(targets, labels)
        ]
        self.open_in_sidebar = open_in_sidebar
        self.input_buffer = ""
        self.active = True
        return list(self.entries)

    def deactivate(self) -> None:
        """Drop every marker and leave hint mode."""
        if self.entries or self.active:
            self.overlay.clear_hint_markers()
        self.active = False
        self.entries = []
        self.input_buffer = ""
        self.open_in_sidebar = False

    def is_hint_char(self, char: str) -> bool:
        """Return whether ``char`` belongs to the label alphabet."""
        return len(char) == 1 and char.lower() in self.chars

    def visible_labels(self) -> list[str]:
        """Labels still matching the typed prefix."""
        return [entry.label for entry in self.entries if entry.visible]

    def narrow(self, char: str) -> NarrowResult:
        """Append ``char`` to the input and select, filter, or tear down."""
        if not self.active:
            return NarrowResult.EXHAUSTED
        self.input_buffer += char.lower()

        for entry in self.entries:
            if entry.label == self.input_buffer:
                target = entry.target
                shift = self.open_in_sidebar
                self.deactivate()
                self.simulator.click(target, shift=shift)
                return NarrowResult.SELECTED

        if not self._apply_filter():
            self.deactivate()
            return NarrowResult.EXHAUSTED
        return NarrowResult.STILL_MATCHING

    def backspace(self) -> None:
        """Drop the last typed character and widen the visible set again."""
        if not self.active or not self.input_buffer:
            return
        self.input_buffer = self.input_buffer[:-1]
        self._apply_filter()

    def _apply_filter(self) -> bool:
        """Show labels starting with the buffer, hide the rest; report any match."""
        buffer = self.input_buffer
        any_match = False
        for entry in self.entries:
            entry.visible = entry.label.startswith(buffer)
            if entry.visible:
                any_match = True
                matched = buffer.upper()
                remaining = entry.label[len(buffer):].upper()
            else:
                matched, remaining = "", entry.label.upper()
            self.overlay.update_hint_marker(entry.marker, matched, remaining, entry.visible)
        return any_match

    def reposition(self) -> None:
        """Move markers after a scroll, hiding those whose target left the viewport."""
        if not self.active:
            return
        for entry in self.entries:
            entry.on_screen = in_viewport(self.host, entry.target)
            self.overlay.reposition_hint_marker(entry.marker, entry.target, entry.on_screen)
