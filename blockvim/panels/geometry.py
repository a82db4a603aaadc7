"""Block visibility inside a scrollable panel."""

from __future__ import annotations

from ..constants import SCROLL_PADDING
from ..host import ContentHost, Element


def scroll_overflow(
    host: ContentHost,
    block: Element,
    panel_element: Element,
    padding: float = SCROLL_PADDING,
) -> float:
    """Return how far ``block`` sticks out of ``panel_element``.

    Negative values mean the block extends above the visible top edge by
    that amount, positive values below the bottom edge, ``0`` fully visible.
    The padding margin is scaled by rendered/intrinsic width so zoomed
    content keeps the same visual margin.
    """
    rect = host.bounding_rect(block)
    layout_width = host.layout_width(block)
    scale = rect.width / layout_width if layout_width > 0 else 1.0
    scaled_padding = scale * padding

    panel_rect = host.bounding_rect(panel_element)

    overflow_top = panel_rect.top - rect.top + scaled_padding
    if overflow_top > 0:
        return -overflow_top

    overflow_bottom = rect.bottom - panel_rect.bottom + scaled_padding
    if overflow_bottom > 0:
        return overflow_bottom

    return 0.0


def is_visible(host: ContentHost, block: Element, panel_element: Element) -> bool:
    """Return ``True`` when ``block`` needs no scrolling inside its panel."""
    return scroll_overflow(host, block, panel_element) == 0


def in_viewport(host: ContentHost, element: Element | None) -> bool:
    """Return ``True`` when ``element`` has area and lies inside the viewport."""
    if element is None:
        return False
    rect = host.bounding_rect(element)
    viewport = host.viewport()
    return (
        rect.has_area()
        and rect.top >= viewport.top
        and rect.left >= viewport.left
        and rect.bottom <= viewport.bottom
        and rect.right <= viewport.right
    )
