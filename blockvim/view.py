"""Selected-block decoration and per-block link hints."""

from __future__ import annotations

import logging

from .constants import DEFAULT_BLOCK_HINT_KEYS, Selectors
from .errors import NothingToActOn
from .host import ContentHost, Element, InputSimulator, Overlay
from .panels import PanelRegistry, in_viewport

LOGGER = logging.getLogger(__name__)


class BlockView:
    """Keeps the overlay in sync with the focused panel's selected block."""

    def __init__(
        self,
        host: ContentHost,
        overlay: Overlay,
        simulator: InputSimulator,
        panels: PanelRegistry,
        max_block_hints: int = len(DEFAULT_BLOCK_HINT_KEYS),
    ) -> None:
        self.host = host
        self.overlay = overlay
        self.simulator = simulator
        self.panels = panels
        self.max_block_hints = max_block_hints

    def selected_block(self) -> Element:
        """The focused panel's selected block."""
        return self.panels.selected().selected_block()

    def block_hint_targets(self, block: Element) -> list[Element]:
        """Clickable descendants of ``block`` that get a hint key, in order."""
        selector = ", ".join(Selectors.block_clickables)
        return self.host.query_all(selector, block)[: self.max_block_hints]

    def hint_target(self, index: int) -> Element | None:
        """Return the element behind block hint ``index``, if there is one."""
        try:
            targets = self.block_hint_targets(self.selected_block())
        except NothingToActOn:
            return None
        return targets[index] if 0 <= index < len(targets) else None

    def refresh(self) -> None:
        """Mark the selected block and its link hints."""
        try:
            block = self.selected_block()
        except NothingToActOn:
            LOGGER.debug("No block to mark")
            self.clear()
            return
        self.overlay.mark_selected_block(block)
        self.overlay.mark_block_hints(self.block_hint_targets(block))
        self._reveal_more_daily_notes()

    def clear(self) -> None:
        """Remove the selection and link hint markers."""
        self.overlay.mark_selected_block(None)
        self.overlay.mark_block_hints([])

    def _reveal_more_daily_notes(self) -> None:
        # The daily notes log loads more pages when its footer is hovered.
        view_more = self.host.query(Selectors.view_more)
        if in_viewport(self.host, view_more):
            self.simulator.hover(view_more)
