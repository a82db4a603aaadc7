"""Command catalogue invoked by the dispatcher and the leader menu.

Every public method is a command. Plain methods act synchronously; the
``async`` ones drive the host through simulated input and wait a fixed
settle delay between steps so the host can re-render. Commands re-read the
selection when they resume, since a later key may already have moved it.

Absence (no panel, no selected block, no highlight, no fold button) is
reported by raising :class:`blockvim.errors.NothingToActOn`; the engine
logs it at debug level and refreshes the view.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable

from .constants import (
    BLOCK_UID_LENGTH,
    MANY_BLOCKS_JUMP,
    MAX_ANCESTOR_DEPTH,
    SCROLL_STEP_PX,
    SETTLE_DELAY_SECONDS,
    Selectors,
)
from .errors import NothingToActOn
from .help import KEYBINDING_SECTIONS
from .hints import PageHints
from .host import Clipboard, ContentHost, Element, InputSimulator, Overlay, ancestors, closest
from .mode import Mode
from .panels import Panel, PanelRegistry
from .search import SearchController
from .view import BlockView

ARROW_UP = "ArrowUp"
ARROW_DOWN = "ArrowDown"

# Commands reachable by name from leader trees and the command registry.
REGISTRY_COMMANDS: tuple[str, ...] = (
    "return_to_normal_mode",
    "select_block_up",
    "select_block_down",
    "select_many_blocks_up",
    "select_many_blocks_down",
    "select_first_block",
    "select_last_block",
    "select_first_visible_block",
    "select_last_visible_block",
    "scroll_up",
    "scroll_down",
    "center_current_block",
    "select_panel_left",
    "select_panel_right",
    "focus_main_panel",
    "close_sidebar_page",
    "edit_block",
    "edit_block_from_end",
    "insert_block_after",
    "insert_block_before",
    "highlight_selected_block",
    "grow_highlight_up",
    "grow_highlight_down",
    "cut_highlight",
    "copy_selected_block",
    "copy_block_reference",
    "copy_block_embed",
    "paste",
    "paste_before",
    "delete_block",
    "undo",
    "redo",
    "move_block_up",
    "move_block_down",
    "toggle_fold",
    "toggle_help",
    "enter_search",
    "next_match",
    "previous_match",
    "show_page_hints",
    "show_page_hints_in_sidebar",
)

# Commands taking the index of a link in the selected block.
HINT_COMMANDS: tuple[str, ...] = ("click_hint", "shift_click_hint", "ctrl_shift_click_hint")


def block_uid(element_id: str) -> str:
    """Return the host block uid embedded at the end of a block element id."""
    return element_id[-BLOCK_UID_LENGTH:]


def block_reference(element_id: str) -> str:
    """Block reference markup ``((uid))`` for a block element id."""
    return f"(({block_uid(element_id)}))"


def block_embed(element_id: str) -> str:
    """Block embed markup ``{{embed: ((uid))}}`` for a block element id."""
    return f"{{{{embed: (({block_uid(element_id)}))}}}}"


class Commands:
    def __init__(
        self,
        *,
        host: ContentHost,
        simulator: InputSimulator,
        clipboard: Clipboard,
        overlay: Overlay,
        panels: PanelRegistry,
        view: BlockView,
        page_hints: PageHints,
        search: SearchController,
        resolve_mode: Callable[[], Mode],
        settle_delay_seconds: float = SETTLE_DELAY_SECONDS,
    ) -> None:
        self.host = host
        self.simulator = simulator
        self.clipboard = clipboard
        self.overlay = overlay
        self.panels = panels
        self.view = view
        self.page_hints = page_hints
        self.search = search
        self.resolve_mode = resolve_mode
        self.settle_delay_seconds = settle_delay_seconds
        self.yank_register = ""

    def registry(self) -> dict[str, Callable[[], object]]:
        """Zero-argument commands keyed by name, for leader leaves."""
        return {name: getattr(self, name) for name in REGISTRY_COMMANDS}

    def lookup(self, name: str, args: tuple[object, ...] = ()) -> Callable[[], object]:
        """Bind command ``name`` to ``args``; raise ``KeyError`` for unknown names."""
        if name not in REGISTRY_COMMANDS and name not in HINT_COMMANDS:
            raise KeyError(name)
        fn = getattr(self, name)
        if args:
            return functools.partial(fn, *args)
        return fn

    async def _settle(self) -> None:
        await asyncio.sleep(self.settle_delay_seconds)

    # ---- state helpers ----

    def selected_panel(self) -> Panel:
        """The focused panel."""
        return self.panels.selected()

    def selected_block(self) -> Element:
        """The selected block of the focused panel."""
        return self.selected_panel().selected_block()

    def selected_block_id(self) -> str:
        """Element id of the selected block."""
        block_id = self.selected_panel().selected_block_id
        if block_id is None:
            raise NothingToActOn("No block is selected")
        return block_id

    def highlighted_blocks(self) -> list[Element]:
        """Blocks inside the host's multi-block highlight, in document order."""
        return self.host.query_all(f"{Selectors.highlight} {Selectors.block}")

    def block_input(self) -> Element | None:
        """The focused block editor, if the focused field is one."""
        field = self.host.active_editable()
        if field is None or not self.host.matches(field, Selectors.block_input):
            return None
        return field

    async def activate_block(self, element: Element) -> Element | None:
        """Click a rendered block to open its editor and return the editor."""
        if self.host.matches(element, Selectors.block):
            self.simulator.click(element)
            await self._settle()
        return self.block_input()

    async def _place_cursor(self, at_end: bool) -> None:
        field = self.block_input()
        if field is None:
            return
        offset = len(self.host.field_text(field)) if at_end else 0
        self.host.set_field_selection(field, offset, offset)

    async def _highlight(self, element: Element | None = None) -> None:
        if element is not None:
            await self.activate_block(element)
        if self.block_input() is None:
            raise NothingToActOn("Not editing a block")
        self.simulator.press("Escape")
        await self._settle()

    # ---- mode ----

    async def return_to_normal_mode(self) -> None:
        """Leave Insert or Visual mode by blurring the focused field."""
        # The host may refocus the field on the next tick.
        self.host.blur()
        await asyncio.sleep(0)
        self.host.blur()

    # ---- navigation ----

    async def jump_blocks(self, delta: int) -> None:
        """Move the selection in Normal mode or grow the highlight in Visual."""
        mode = self.resolve_mode()
        if mode is Mode.NORMAL:
            self.selected_panel().select_relative(delta)
        elif mode is Mode.VISUAL:
            key = ARROW_DOWN if delta > 0 else ARROW_UP
            for _ in range(abs(delta)):
                self.simulator.press(key, shift=True)
                await self._settle()
            highlighted = self.highlighted_blocks()
            if not highlighted:
                raise NothingToActOn("No block is highlighted")
            edge = highlighted[-1] if delta > 0 else highlighted[0]
            self.selected_panel().scroll_until_visible(edge)

    async def select_block_up(self) -> None:
        """Select the previous block."""
        await self.jump_blocks(-1)

    async def select_block_down(self) -> None:
        """Select the next block."""
        await self.jump_blocks(1)

    async def select_many_blocks_up(self) -> None:
        """Jump several blocks up."""
        await self.jump_blocks(-MANY_BLOCKS_JUMP)

    async def select_many_blocks_down(self) -> None:
        """Jump several blocks down."""
        await self.jump_blocks(MANY_BLOCKS_JUMP)

    def select_first_block(self) -> None:
        """Select the first block of the focused panel."""
        self.selected_panel().select_first()

    def select_last_block(self) -> None:
        """Select the last block of the focused panel."""
        self.selected_panel().select_last()

    def select_first_visible_block(self) -> None:
        """Select the topmost fully visible block."""
        self.selected_panel().select_first_visible()

    def select_last_visible_block(self) -> None:
        """Select the bottommost fully visible block."""
        self.selected_panel().select_last_visible()

    def scroll_up(self) -> None:
        """Scroll the focused panel up one step, keeping a visible selection."""
        self.selected_panel().scroll_and_reselect(-SCROLL_STEP_PX)

    def scroll_down(self) -> None:
        """Scroll the focused panel down one step, keeping a visible selection."""
        self.selected_panel().scroll_and_reselect(SCROLL_STEP_PX)

    def center_current_block(self) -> None:
        """Scroll the selected block to the middle of the view."""
        self.host.scroll_into_view(self.selected_block(), align="center", smooth=True)

    # ---- panels ----

    def _focus(self, panel: Panel | None) -> None:
        if panel is None:
            raise NothingToActOn("No panels are registered")
        self.panels.focus(panel)

    def select_panel_left(self) -> None:
        """Focus the panel to the left."""
        self._focus(self.panels.previous_panel())

    def select_panel_right(self) -> None:
        """Focus the panel to the right."""
        self._focus(self.panels.next_panel())

    def focus_main_panel(self) -> None:
        """Focus the main page panel."""
        self._focus(self.panels.main_panel())

    def close_sidebar_page(self) -> None:
        """Close the sidebar page holding the selected block."""
        page = closest(self.host, self.selected_block(), Selectors.sidebar_page, MAX_ANCESTOR_DEPTH)
        if page is None:
            raise NothingToActOn("Selected block is not in a sidebar page")
        close_button = self.host.query(Selectors.close_button, page)
        if close_button is None:
            raise NothingToActOn("Sidebar page has no close button")
        self.simulator.click(close_button)

    # ---- insert ----

    async def edit_block(self) -> None:
        """Open the selected block for editing with the cursor at the start."""
        await self.activate_block(self.selected_block())
        await self._place_cursor(at_end=False)

    async def edit_block_from_end(self) -> None:
        """Open the selected block for editing with the cursor at the end."""
        await self.activate_block(self.selected_block())
        await self._place_cursor(at_end=True)

    async def insert_block_after(self) -> None:
        """Create an empty sibling block below the selected one."""
        await self.activate_block(self.selected_block())
        await self._place_cursor(at_end=True)
        self.simulator.press("Enter")
        await self._settle()

    async def insert_block_before(self) -> None:
        """Create an empty sibling block above the selected one."""
        await self.activate_block(self.selected_block())
        await self._place_cursor(at_end=False)
        self.simulator.press("Enter")
        await self._settle()

    # ---- visual ----

    async def highlight_selected_block(self) -> None:
        """Enter Visual mode with the selected block highlighted."""
        await self._highlight(self.selected_block())

    async def _grow_highlight(self, key: str) -> None:
        if self.resolve_mode() is Mode.NORMAL:
            await self._highlight(self.selected_block())
        self.simulator.press(key, shift=True)
        await self._settle()

    async def grow_highlight_up(self) -> None:
        """Extend the highlight one block up."""
        await self._grow_highlight(ARROW_UP)

    async def grow_highlight_down(self) -> None:
        """Extend the highlight one block down."""
        await self._grow_highlight(ARROW_DOWN)

    async def cut_highlight(self) -> None:
        """Cut the highlighted blocks; in Normal mode start a highlight instead."""
        if self.resolve_mode() is Mode.NORMAL:
            await self.highlight_selected_block()
            return
        highlighted = self.highlighted_blocks()
        if not highlighted:
            raise NothingToActOn("No block is highlighted")
        self.yank_register = "\n".join(self.host.text_of(block) for block in highlighted)
        self.host.exec_native("cut")
        await asyncio.sleep(0)
        await self.return_to_normal_mode()

    # ---- clipboard ----

    async def _block_text(self, element: Element) -> str:
        field = await self.activate_block(element)
        return self.host.field_text(field) if field is not None else ""

    async def copy_selected_block(self) -> None:
        """Copy the selected or highlighted blocks to the register and clipboard."""
        if self.resolve_mode() is Mode.VISUAL:
            highlighted = self.highlighted_blocks()
            if not highlighted:
                raise NothingToActOn("No block is highlighted")
            text = "\n".join(self.host.text_of(block) for block in highlighted)
        else:
            text = await self._block_text(self.selected_block())
        self.yank_register = text
        self.clipboard.write_text(text)
        await self.return_to_normal_mode()

    def copy_block_reference(self) -> None:
        """Copy a reference to the selected block."""
        self.clipboard.write_text(block_reference(self.selected_block_id()))

    def copy_block_embed(self) -> None:
        """Copy an embed of the selected block."""
        self.clipboard.write_text(block_embed(self.selected_block_id()))

    async def _fill_new_block(self) -> None:
        field = self.block_input()
        if self.yank_register and field is not None:
            self.host.set_field_text(field, self.yank_register)
        else:
            self.host.exec_native("paste")
        await self._settle()

    async def paste(self) -> None:
        """Paste into a new block below the selected one."""
        await self.insert_block_after()
        await self._fill_new_block()
        await self.return_to_normal_mode()

    async def paste_before(self) -> None:
        """Paste into a new block above the selected one."""
        await self.jump_blocks(-1)
        await self.insert_block_after()
        await self._fill_new_block()
        await self.return_to_normal_mode()

    async def delete_block(self) -> None:
        """Delete the selected block."""
        await self._highlight(self.selected_block())
        self.simulator.press("Backspace")
        await self._settle()

    # ---- history ----

    async def undo(self) -> None:
        """Undo through the host's own history."""
        self.simulator.press("z", meta=True)
        await self._settle()
        await self.return_to_normal_mode()

    async def redo(self) -> None:
        """Redo through the host's own history."""
        self.simulator.press("z", meta=True, shift=True)
        await self._settle()
        await self.return_to_normal_mode()

    # ---- block movement ----

    async def _move_block(self, key: str) -> None:
        await self.activate_block(self.selected_block())
        self.simulator.press(key, meta=True, shift=True)
        await self._settle()

    async def move_block_up(self) -> None:
        """Move the selected block above its previous sibling."""
        await self._move_block(ARROW_UP)

    async def move_block_down(self) -> None:
        """Move the selected block below its next sibling."""
        await self._move_block(ARROW_DOWN)

    # ---- folding ----

    def nearest_fold_button(self, element: Element) -> Element:
        """Return the first fold button inside ``element`` or its nearest ancestor."""
        for candidate in (element, *ancestors(self.host, element, MAX_ANCESTOR_DEPTH)):
            button = self.host.query(Selectors.fold_button, candidate)
            if button is not None:
                return button
        raise NothingToActOn("No fold button near the selected block")

    async def toggle_fold(self) -> None:
        """Expand or collapse the selected block's children."""
        button = self.nearest_fold_button(self.selected_block())
        # The caret only accepts clicks while hovered.
        self.simulator.hover(button)
        await self._settle()
        self.simulator.click(button)
        await self._settle()

    # ---- block link hints ----

    def _hint(self, index: int) -> Element:
        target = self.view.hint_target(index)
        if target is None:
            raise NothingToActOn(f"No link hint {index}")
        return target

    def click_hint(self, index: int) -> None:
        """Click link ``index`` of the selected block."""
        self.simulator.click(self._hint(index))

    def shift_click_hint(self, index: int) -> None:
        """Shift-click link ``index``, opening it in the sidebar."""
        self.simulator.click(self._hint(index), shift=True)

    def ctrl_shift_click_hint(self, index: int) -> None:
        """Modifier-click link ``index`` for the host's alternate open."""
        self.simulator.click(self._hint(index), shift=True, meta=True)

    # ---- page hints ----

    def show_page_hints(self) -> None:
        """Label every clickable element in view."""
        self.page_hints.activate()

    def show_page_hints_in_sidebar(self) -> None:
        """Label clickables in view; the chosen one opens in the sidebar."""
        self.page_hints.activate(open_in_sidebar=True)

    # ---- help and search ----

    def toggle_help(self) -> None:
        """Show or hide the keybinding reference."""
        if self.overlay.help_visible():
            self.overlay.hide_help()
        else:
            self.overlay.show_help(KEYBINDING_SECTIONS)

    def enter_search(self) -> None:
        """Open the search prompt."""
        self.search.enter()

    def next_match(self) -> None:
        """Focus the next search match."""
        self.search.next_match()

    def previous_match(self) -> None:
        """Focus the previous search match."""
        self.search.previous_match()
