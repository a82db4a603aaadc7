"""Ordered registry of panels plus the focused-panel pointer.

The registry is rebuilt wholesale whenever the host reports a structural
change. Panels whose element survives a rebuild keep their remembered
selection; everything else is dropped. Elements are looked up by equality,
so a host may hand out a fresh handle per query as long as handles to the
same node compare and hash equal.
"""

from __future__ import annotations

from ..constants import MAX_ANCESTOR_DEPTH, Selectors
from ..errors import NothingToActOn
from ..host import ContentHost, Element, ancestors
from .panel import Panel, clamp


class PanelRegistry:
    """Panels in document order (main first) and which one has focus."""

    def __init__(
        self,
        host: ContentHost,
        panel_roots: tuple[str, ...] = Selectors.panel_roots,
    ) -> None:
        self.host = host
        self.panel_roots = panel_roots
        self.order: list[Panel] = []
        self._by_element: dict[Element, Panel] = {}
        self.focused_index = 0

    def update(self) -> None:
        """Replace the panel list from the host's current panel roots."""
        elements: list[Element] = []
        seen: set[Element] = set()
        for selector in self.panel_roots:
            for element in self.host.query_all(selector):
                if element in seen:
                    continue
                seen.add(element)
                elements.append(element)

        previous = self._by_element
        self.order = [previous.get(element) or Panel(self.host, element) for element in elements]
        self._by_element = {panel.element: panel for panel in self.order}

    def __len__(self) -> int:
        return len(self.order)

    def get(self, element: Element) -> Panel | None:
        """Return the panel rooted at ``element``, if registered."""
        return self._by_element.get(element)

    def at(self, index: int) -> Panel | None:
        """Return the panel at ``index`` clamped into the live registry."""
        if not self.order:
            return None
        return self.order[clamp(index, 0, len(self.order) - 1)]

    def main_panel(self) -> Panel | None:
        """Return the main page panel (always first)."""
        return self.at(0)

    def previous_panel(self) -> Panel | None:
        """Return the panel left of the focused one, saturating at the main panel."""
        return self.at(self.focused_index - 1)

    def next_panel(self) -> Panel | None:
        """Return the panel right of the focused one, saturating at the last."""
        return self.at(self.focused_index + 1)

    def selected(self) -> Panel:
        """Return the focused panel, clamping a pointer left dangling by a rebuild."""
        if not self.order:
            raise NothingToActOn("No panels are registered")
        self.focused_index = clamp(self.focused_index, 0, len(self.order) - 1)
        return self.order[self.focused_index]

    def focus(self, panel: Panel) -> None:
        """Make ``panel`` the focused panel and bring it into view."""
        try:
            self.focused_index = self.order.index(panel)
        except ValueError:
            return
        self.host.scroll_into_view(panel.element, align="start", smooth=True)

    def from_block(self, block: Element) -> Panel | None:
        """Return the registered panel containing ``block``."""
        for ancestor in ancestors(self.host, block, MAX_ANCESTOR_DEPTH):
            panel = self.get(ancestor)
            if panel is not None:
                return panel
        return None
