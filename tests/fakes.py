"""In-memory capability fakes shared by the test suite.

Elements form a plain tree. A selector is matched by exact membership in
an element's ``selectors`` set (after splitting selector lists on commas),
which is enough to exercise the engine without a CSS engine.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from blockvim.config import EngineSettings
from blockvim.constants import Selectors
from blockvim.engine import Engine
from blockvim.host import HostEvent, Rect
from blockvim.leader import Group


class FakeElement:
    def __init__(
        self,
        *selectors: str,
        id: str = "",
        rect: Rect | None = None,
        text: str = "",
        layout_width: float | None = None,
    ) -> None:
        self.selectors = set(selectors)
        self.id = id
        self.rect = rect if rect is not None else Rect(0, 0, 100, 20)
        self.text = text
        self.value = text
        self.selection = (0, 0)
        self.layout_width = layout_width
        self.parent: FakeElement | None = None
        self.children: list[FakeElement] = []

    def add(self, child: FakeElement) -> FakeElement:
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: FakeElement) -> None:
        self.children.remove(child)
        child.parent = None

    def descendants(self) -> Iterable[FakeElement]:
        for child in self.children:
            yield child
            yield from child.descendants()

    def __repr__(self) -> str:
        return f"FakeElement({self.id or sorted(self.selectors)})"


def _selector_parts(selector: str) -> list[str]:
    return [part.strip() for part in selector.split(",")]


class FakeHost:
    def __init__(self, viewport: Rect | None = None) -> None:
        self.root = FakeElement("body")
        self._viewport = viewport if viewport is not None else Rect(0, 0, 1000, 800)
        self.focused: FakeElement | None = None
        self.blur_count = 0
        self.native_commands: list[str] = []
        self.scrolled_into_view: list[tuple[FakeElement, str, bool]] = []
        self.scrolled_by: list[tuple[FakeElement, float]] = []
        self.subscribers: list[Callable[[HostEvent], None]] = []

    # ---- test helpers ----

    def emit(self, event: HostEvent) -> None:
        for callback in list(self.subscribers):
            callback(event)

    # ---- ContentHost ----

    def matches(self, element: FakeElement, selector: str) -> bool:
        return any(part in element.selectors for part in _selector_parts(selector))

    def query_all(self, selector: str, within: FakeElement | None = None) -> list[FakeElement]:
        scope = within if within is not None else self.root
        return [element for element in scope.descendants() if self.matches(element, selector)]

    def query(self, selector: str, within: FakeElement | None = None) -> FakeElement | None:
        found = self.query_all(selector, within)
        return found[0] if found else None

    def element_by_id(self, element_id: str) -> FakeElement | None:
        for element in self.root.descendants():
            if element.id == element_id:
                return element
        return None

    def element_id(self, element: FakeElement) -> str:
        return element.id

    def parent(self, element: FakeElement) -> FakeElement | None:
        return element.parent

    def bounding_rect(self, element: FakeElement) -> Rect:
        return element.rect

    def layout_width(self, element: FakeElement) -> float:
        return element.layout_width if element.layout_width is not None else element.rect.width

    def viewport(self) -> Rect:
        return self._viewport

    def scroll_by(self, element: FakeElement, delta_px: float) -> None:
        self.scrolled_by.append((element, delta_px))
        for descendant in element.descendants():
            descendant.rect = replace(descendant.rect, top=descendant.rect.top - delta_px)

    def scroll_into_view(self, element: FakeElement, *, align: str = "nearest", smooth: bool = False) -> None:
        self.scrolled_into_view.append((element, align, smooth))

    def active_editable(self) -> FakeElement | None:
        return self.focused

    def field_text(self, element: FakeElement) -> str:
        return element.value

    def set_field_text(self, element: FakeElement, text: str) -> None:
        element.value = text

    def field_selection(self, element: FakeElement) -> tuple[int, int]:
        return element.selection

    def set_field_selection(self, element: FakeElement, start: int, end: int) -> None:
        element.selection = (start, end)

    def text_of(self, element: FakeElement) -> str:
        return element.text

    def blur(self) -> None:
        self.blur_count += 1
        self.focused = None

    def exec_native(self, command: str) -> None:
        self.native_commands.append(command)

    def subscribe(self, callback: Callable[[HostEvent], None]) -> Callable[[], None]:
        self.subscribers.append(callback)

        def disconnect() -> None:
            if callback in self.subscribers:
                self.subscribers.remove(callback)

        return disconnect


class FakeSimulator:
    """Records simulated input; ``on_click`` lets a test emulate host reactions."""

    def __init__(self) -> None:
        self.clicks: list[tuple[FakeElement, dict[str, bool]]] = []
        self.hovers: list[FakeElement] = []
        self.presses: list[tuple[str, dict[str, bool]]] = []
        self.on_click: Callable[[FakeElement], None] | None = None

    def click(self, element: FakeElement, *, shift: bool = False, meta: bool = False, ctrl: bool = False) -> None:
        self.clicks.append((element, {"shift": shift, "meta": meta, "ctrl": ctrl}))
        if self.on_click is not None:
            self.on_click(element)

    def hover(self, element: FakeElement) -> None:
        self.hovers.append(element)

    def press(
        self,
        key: str,
        *,
        shift: bool = False,
        meta: bool = False,
        ctrl: bool = False,
        alt: bool = False,
    ) -> None:
        self.presses.append((key, {"shift": shift, "meta": meta, "ctrl": ctrl, "alt": alt}))


class FakeClipboard:
    def __init__(self) -> None:
        self.text = ""

    def read_text(self) -> str:
        return self.text

    def write_text(self, text: str) -> None:
        self.text = text


class FakeOverlay:
    def __init__(self) -> None:
        self.selected_block: FakeElement | None = None
        self.block_hints: list[FakeElement] = []
        self.markers: dict[int, dict[str, Any]] = {}
        self.which_key: tuple[list[str], list[tuple[str, str, bool]], float] | None = None
        self.help_sections: Sequence[Any] | None = None
        self.search_prompt_open = False
        self.prompt_text = ""
        self.search_highlights: list[Any] = []
        self.focused_match: Any = None
        self.modes: list[str] = []

    def mark_selected_block(self, element: FakeElement | None) -> None:
        self.selected_block = element

    def mark_block_hints(self, elements: Sequence[FakeElement]) -> None:
        self.block_hints = list(elements)

    def create_hint_marker(self, target: FakeElement, label: str) -> int:
        marker = len(self.markers)
        self.markers[marker] = {"target": target, "label": label, "matched": "", "visible": True, "on_screen": True}
        return marker

    def update_hint_marker(self, marker: int, matched: str, remaining: str, visible: bool) -> None:
        self.markers[marker].update(matched=matched, remaining=remaining, visible=visible)

    def reposition_hint_marker(self, marker: int, target: FakeElement, on_screen: bool) -> None:
        self.markers[marker].update(top=target.rect.top, on_screen=on_screen)

    def clear_hint_markers(self) -> None:
        self.markers = {}

    def show_which_key(
        self,
        path: Sequence[str],
        entries: Sequence[tuple[str, str, bool]],
        *,
        delay_seconds: float = 0.0,
    ) -> None:
        self.which_key = (list(path), list(entries), delay_seconds)

    def hide_which_key(self) -> None:
        self.which_key = None

    def show_help(self, sections: Sequence[Any]) -> None:
        self.help_sections = sections

    def hide_help(self) -> None:
        self.help_sections = None

    def help_visible(self) -> bool:
        return self.help_sections is not None

    def open_search_prompt(self) -> None:
        self.search_prompt_open = True

    def search_prompt_text(self) -> str:
        return self.prompt_text

    def close_search_prompt(self) -> None:
        self.search_prompt_open = False

    def highlight_search_matches(self, matches: Sequence[Any]) -> None:
        self.search_highlights = list(matches)

    def focus_search_match(self, match: Any) -> None:
        self.focused_match = match

    def clear_search_matches(self) -> None:
        self.search_highlights = []
        self.focused_match = None

    def show_mode(self, mode_name: str) -> None:
        self.modes.append(mode_name)


BLOCK_HEIGHT = 40
# Keeps the first block clear of the visibility padding.
FIRST_BLOCK_OFFSET = 60


def block_id(panel_index: int, block_index: int) -> str:
    """Host-style block element id ending in a nine-character uid."""
    return f"block-input-user-p{panel_index}b{block_index:06d}"


def add_panel(
    host: FakeHost,
    block_count: int,
    *,
    sidebar: bool = False,
    top: float = 0,
    height: float = 800,
) -> FakeElement:
    """Attach a panel element with ``block_count`` stacked blocks to the host."""
    panel_index = sum(1 for _ in host.query_all(", ".join(Selectors.panel_roots)))
    root_selector = Selectors.panel_roots[1] if sidebar else Selectors.panel_roots[0]
    panel = host.root.add(FakeElement(root_selector, rect=Rect(top, 0, 600, height)))
    container = panel
    if sidebar:
        container = panel.add(FakeElement(Selectors.sidebar_page))
        container.add(FakeElement(Selectors.close_button))
    for index in range(block_count):
        container.add(
            FakeElement(
                Selectors.block,
                id=block_id(panel_index, index),
                rect=Rect(top + FIRST_BLOCK_OFFSET + index * BLOCK_HEIGHT, 0, 600, BLOCK_HEIGHT - 4),
                text=f"block {index}",
            )
        )
    return panel


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class Harness:
    engine: Engine
    host: FakeHost
    simulator: FakeSimulator
    clipboard: FakeClipboard
    overlay: FakeOverlay


def build_harness(
    *panel_sizes: int,
    clock: FakeClock | None = None,
    leader_tree: Group | None = None,
    **settings: Any,
) -> Harness:
    """Start an engine over fresh fakes; the first panel is the main one."""
    host = FakeHost()
    for index, size in enumerate(panel_sizes):
        add_panel(host, size, sidebar=index > 0)
    simulator = FakeSimulator()
    clipboard = FakeClipboard()
    overlay = FakeOverlay()
    settings.setdefault("settle_delay_seconds", 0.0)
    engine = Engine(
        host,
        simulator,
        clipboard,
        overlay,
        settings=EngineSettings(**settings),
        leader_tree=leader_tree,
        clock=clock if clock is not None else FakeClock(),
    )
    engine.start()
    return Harness(engine, host, simulator, clipboard, overlay)
