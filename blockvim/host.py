"""Capability interfaces consumed by the engine.

The engine never touches a rendering environment directly. Everything it
needs from the host editor is expressed as one of the protocols below and
injected into :class:`blockvim.engine.Engine`. Elements are opaque handles:
the engine only passes them back to the capability that produced them.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

Element = Any


@dataclass(frozen=True)
class Rect:
    """Rendered bounding box in viewport coordinates."""

    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


HOST_EDIT_BLOCK = "edit_block"
HOST_BLUR_BLOCK = "blur_block"
HOST_SIDEBAR_TOGGLE = "sidebar_toggle"
HOST_SIDEBAR_CHANGE = "sidebar_change"
HOST_PAGE_CHANGE = "page_change"
HOST_SCROLL = "scroll"


@dataclass(frozen=True)
class HostEvent:
    """Structural or focus change reported by the host.

    ``element`` is the block input for edit/blur events. ``sidebar_open``
    is only meaningful for sidebar toggle events.
    """

    kind: str
    element: Element | None = None
    sidebar_open: bool | None = None


class ContentHost(Protocol):
    """Query, geometry, focus and field access on the host content tree."""

    def query(self, selector: str, within: Element | None = None) -> Element | None: ...

    def query_all(self, selector: str, within: Element | None = None) -> list[Element]: ...

    def element_by_id(self, element_id: str) -> Element | None: ...

    def element_id(self, element: Element) -> str: ...

    def parent(self, element: Element) -> Element | None: ...

    def matches(self, element: Element, selector: str) -> bool: ...

    def bounding_rect(self, element: Element) -> Rect: ...

    def layout_width(self, element: Element) -> float: ...

    def viewport(self) -> Rect: ...

    def scroll_by(self, element: Element, delta_px: float) -> None: ...

    def scroll_into_view(self, element: Element, *, align: str = "nearest", smooth: bool = False) -> None: ...

    def active_editable(self) -> Element | None: ...

    def field_text(self, element: Element) -> str: ...

    def set_field_text(self, element: Element, text: str) -> None: ...

    def field_selection(self, element: Element) -> tuple[int, int]: ...

    def set_field_selection(self, element: Element, start: int, end: int) -> None: ...

    def text_of(self, element: Element) -> str: ...

    def blur(self) -> None: ...

    def exec_native(self, command: str) -> None: ...

    def subscribe(self, callback: Callable[[HostEvent], None]) -> Callable[[], None]: ...


class InputSimulator(Protocol):
    """Simulated pointer activation and key presses."""

    def click(
        self,
        element: Element,
        *,
        shift: bool = False,
        meta: bool = False,
        ctrl: bool = False,
    ) -> None: ...

    def hover(self, element: Element) -> None: ...

    def press(
        self,
        key: str,
        *,
        shift: bool = False,
        meta: bool = False,
        ctrl: bool = False,
        alt: bool = False,
    ) -> None: ...


class Clipboard(Protocol):
    def read_text(self) -> str: ...

    def write_text(self, text: str) -> None: ...


class Overlay(Protocol):
    """Visual markers drawn over host content.

    Page hint markers are created per target, updated while the user
    narrows and repositioned when the content scrolls. Everything else is
    replace-or-clear.
    """

    def mark_selected_block(self, element: Element | None) -> None: ...

    def mark_block_hints(self, elements: Sequence[Element]) -> None: ...

    def create_hint_marker(self, target: Element, label: str) -> Any: ...

    def update_hint_marker(self, marker: Any, matched: str, remaining: str, visible: bool) -> None: ...

    def reposition_hint_marker(self, marker: Any, target: Element, on_screen: bool) -> None: ...

    def clear_hint_markers(self) -> None: ...

    def show_which_key(
        self,
        path: Sequence[str],
        entries: Sequence[tuple[str, str, bool]],
        *,
        delay_seconds: float = 0.0,
    ) -> None: ...

    def hide_which_key(self) -> None: ...

    def show_help(self, sections: Sequence[tuple[str, Sequence[tuple[str, str]]]]) -> None: ...

    def hide_help(self) -> None: ...

    def help_visible(self) -> bool: ...

    def open_search_prompt(self) -> None: ...

    def search_prompt_text(self) -> str: ...

    def close_search_prompt(self) -> None: ...

    def highlight_search_matches(self, matches: Sequence[Any]) -> None: ...

    def focus_search_match(self, match: Any) -> None: ...

    def clear_search_matches(self) -> None: ...

    def show_mode(self, mode_name: str) -> None: ...


def ancestors(host: ContentHost, element: Element, max_depth: int) -> list[Element]:
    """Return up to ``max_depth`` ancestors of ``element``, nearest first."""
    chain: list[Element] = []
    current = host.parent(element)
    while current is not None and len(chain) < max_depth:
        chain.append(current)
        current = host.parent(current)
    return chain


def closest(host: ContentHost, element: Element, selector: str, max_depth: int) -> Element | None:
    """Return ``element`` or its nearest ancestor matching ``selector``."""
    if host.matches(element, selector):
        return element
    for ancestor in ancestors(host, element, max_depth):
        if host.matches(ancestor, selector):
            return ancestor
    return None
