"""One scrollable region and its selectable blocks.

The block list is re-queried on every access: the host re-renders on its
own schedule, so nothing derived from it is cached. The panel only
remembers the selected block id and the index it had, which is what makes
stale-id recovery possible.
"""

from __future__ import annotations

import logging

from ..constants import Selectors
from ..errors import NothingToActOn
from ..host import ContentHost, Element
from .geometry import is_visible, scroll_overflow

LOGGER = logging.getLogger(__name__)


def clamp(value: int, low: int, high: int) -> int:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


class Panel:
    """Independently scrollable region holding an ordered list of blocks."""

    def __init__(self, host: ContentHost, element: Element) -> None:
        self.host = host
        self.element = element
        self._selected_block_id: str | None = None
        self.block_index = 0

    def blocks(self) -> list[Element]:
        """Return the panel's blocks in document order, freshly queried."""
        return self.host.query_all(Selectors.selectable_block, self.element)

    def block_ids(self) -> list[str]:
        """Element ids of the panel's blocks, in order."""
        return [self.host.element_id(block) for block in self.blocks()]

    def index_of(self, block_id: str) -> int:
        try:
            return self.block_ids().index(block_id)
        except ValueError:
            return -1

    @property
    def selected_block_id(self) -> str | None:
        """Remembered selection, reselected by clamped index when stale.

        Returns ``None`` only when the panel has no blocks at all.
        """
        block_id = self._selected_block_id
        if block_id is None or self.host.element_by_id(block_id) is None:
            ids = self.block_ids()
            if not ids:
                return None
            self.block_index = clamp(self.block_index, 0, len(ids) - 1)
            if block_id is not None:
                LOGGER.debug("Selected block %s went stale; reselecting index %d", block_id, self.block_index)
            self.select(ids[self.block_index])
        return self._selected_block_id

    def selected_block(self) -> Element:
        """Return the selected block element or raise ``NothingToActOn``."""
        block_id = self.selected_block_id
        element = self.host.element_by_id(block_id) if block_id is not None else None
        if element is None:
            raise NothingToActOn("No block is selected")
        return element

    def select(self, block_id: str) -> None:
        """Remember ``block_id`` as selected and scroll it minimally into view."""
        self._selected_block_id = block_id
        ids = self.block_ids()
        if ids:
            index = ids.index(block_id) if block_id in ids else self.block_index
            self.block_index = clamp(index, 0, len(ids) - 1)
        element = self.host.element_by_id(block_id)
        if element is not None:
            self.scroll_until_visible(element)

    def scroll_until_visible(self, element: Element) -> None:
        """Scroll the least distance that brings ``element`` into view."""
        self.host.scroll_into_view(element, align="nearest")

    def select_relative(self, delta: int) -> None:
        """Move the selection by ``delta`` blocks, saturating at both ends."""
        block_id = self.selected_block_id
        if block_id is None:
            return
        ids = self.block_ids()
        index = ids.index(block_id) if block_id in ids else self.block_index
        self.select(ids[clamp(index + delta, 0, len(ids) - 1)])

    def select_first(self) -> None:
        """Select the first block; no-op on an empty panel."""
        ids = self.block_ids()
        if ids:
            self.select(ids[0])

    def select_last(self) -> None:
        """Select the last block; no-op on an empty panel."""
        ids = self.block_ids()
        if ids:
            self.select(ids[-1])

    def first_visible_block(self) -> Element | None:
        """Return the topmost block fully inside the padded panel bounds."""
        for block in self.blocks():
            if is_visible(self.host, block, self.element):
                return block
        return None

    def last_visible_block(self) -> Element | None:
        """Return the bottommost block fully inside the padded panel bounds."""
        for block in reversed(self.blocks()):
            if is_visible(self.host, block, self.element):
                return block
        return None

    def select_first_visible(self) -> None:
        """Select the topmost visible block, if any."""
        block = self.first_visible_block()
        if block is not None:
            self.select(self.host.element_id(block))

    def select_last_visible(self) -> None:
        """Select the bottommost visible block, if any."""
        block = self.last_visible_block()
        if block is not None:
            self.select(self.host.element_id(block))

    def scroll(self, delta_px: float) -> None:
        """Scroll the panel by ``delta_px`` pixels."""
        self.host.scroll_by(self.element, delta_px)

    def scroll_and_reselect(self, delta_px: float) -> None:
        """Scroll by ``delta_px`` and keep the selection on a visible block."""
        self.scroll(delta_px)
        block_id = self.selected_block_id
        if block_id is None:
            return
        block = self.host.element_by_id(block_id)
        if block is None:
            return
        overflow = scroll_overflow(self.host, block, self.element)
        if overflow < 0:
            self.select_first_visible()
        elif overflow > 0:
            self.select_last_visible()
