"""Top-level key dispatcher and the context object that owns all state.

Each key is classified against the live mode and handled by exactly one
branch, in priority order:

1. Search: only Enter/Escape reach the search controller.
2. Hint: every key is consumed by the page hint overlay.
3. Insert (not Escape): left to the host's field.
4. Host-native shortcuts (unbound meta keys, Escape over host dialogs).
5. Leader menu open: the key advances the menu (Escape closes it).
6. Normal + leader key: open the leader menu.
7. Help panel open: Escape/``?`` close it, everything else is swallowed.
8. Sequence matcher and single-key bindings.

``handle_key`` returns ``True`` when the host's default handling of the
key must be suppressed, which happens exactly when a command or a
deliberate no-op was resolved.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable

from .commands import Commands
from .config import EngineSettings
from .constants import Selectors
from .errors import NothingToActOn
from .hints import PageHints
from .host import (
    HOST_BLUR_BLOCK,
    HOST_EDIT_BLOCK,
    HOST_PAGE_CHANGE,
    HOST_SCROLL,
    HOST_SIDEBAR_CHANGE,
    HOST_SIDEBAR_TOGGLE,
    Clipboard,
    ContentHost,
    Element,
    HostEvent,
    InputSimulator,
    Overlay,
)
from .input import KeyEvent, SequenceMatcher, build_keymaps
from .leader import Group, LeaderMenu, default_leader_tree, merge_trees
from .mode import Mode, ModeResolver
from .panels import PanelRegistry
from .search import SearchController
from .view import BlockView

LOGGER = logging.getLogger(__name__)

UserConfigLoader = Callable[[], Awaitable["Group | None"]]


class Engine:
    """Modal command dispatch over injected host capabilities.

    All registries (panels, sequence buffer, leader and hint state) live on
    the instance, so independent engines never share state.
    """

    def __init__(
        self,
        host: ContentHost,
        simulator: InputSimulator,
        clipboard: Clipboard,
        overlay: Overlay,
        *,
        settings: EngineSettings | None = None,
        leader_tree: Group | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host
        self.simulator = simulator
        self.clipboard = clipboard
        self.overlay = overlay
        self.settings = settings if settings is not None else EngineSettings()

        self.panels = PanelRegistry(host)
        self.page_hints = PageHints(host, overlay, simulator, self.settings.hint_chars)
        self.search = SearchController(host, overlay)
        self.modes = ModeResolver(
            host,
            search_active=lambda: self.search.active,
            hint_active=lambda: self.page_hints.active,
        )
        self.view = BlockView(
            host,
            overlay,
            simulator,
            self.panels,
            max_block_hints=len(self.settings.block_hint_keys),
        )
        self.commands = Commands(
            host=host,
            simulator=simulator,
            clipboard=clipboard,
            overlay=overlay,
            panels=self.panels,
            view=self.view,
            page_hints=self.page_hints,
            search=self.search,
            resolve_mode=self.modes.resolve,
            settle_delay_seconds=self.settings.settle_delay_seconds,
        )
        self.matcher = SequenceMatcher(
            build_keymaps(self.settings.block_hint_keys),
            timeout_seconds=self.settings.sequence_timeout_seconds,
            clock=clock,
        )
        self.default_leader_tree = leader_tree if leader_tree is not None else default_leader_tree()
        self.leader = LeaderMenu(
            self.default_leader_tree,
            self.commands.registry(),
            overlay,
            run_command=self.run_command,
            popup_delay_seconds=self.settings.which_key_delay_seconds,
        )
        self._disconnect: Callable[[], None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    def mode(self) -> Mode:
        """Classify the current interaction mode from live host state."""
        return self.modes.resolve()

    # ---- lifecycle ----

    def start(self) -> None:
        """Build the panel registry, draw the view and follow host events."""
        self.panels.update()
        self.refresh_view()
        if self._disconnect is None:
            self._disconnect = self.host.subscribe(self.on_host_event)

    def stop(self) -> None:
        """Stop following host events and drop all transient state."""
        if self._disconnect is not None:
            self._disconnect()
            self._disconnect = None
        self.matcher.clear()
        self.leader.reset()
        self.page_hints.deactivate()
        self.view.clear()

    async def apply_user_config(self, loader: UserConfigLoader) -> Group:
        """Merge the loader's partial leader tree over the default tree.

        A loader that fails or returns ``None`` leaves the default tree in
        place.
        """
        try:
            user_tree = await loader()
        except Exception:
            LOGGER.warning("Could not load user configuration; using the default leader tree", exc_info=True)
            user_tree = None
        tree = self.default_leader_tree
        if user_tree is not None:
            tree = merge_trees(tree, user_tree)
        self.leader.set_tree(tree)
        return tree

    # ---- host events ----

    def on_host_event(self, event: HostEvent) -> None:
        """Keep the panel registry and view in step with host changes."""
        kind = event.kind
        if kind == HOST_EDIT_BLOCK:
            if event.element is not None:
                self._select_edited_block(event.element)
        elif kind == HOST_SIDEBAR_TOGGLE:
            self.panels.update()
            if event.sidebar_open is False:
                main = self.panels.main_panel()
                if main is not None:
                    self.panels.focus(main)
        elif kind == HOST_SIDEBAR_CHANGE:
            self.panels.update()
        elif kind == HOST_PAGE_CHANGE:
            self.panels.update()
            main = self.panels.main_panel()
            if main is not None:
                main.select_first()
        elif kind == HOST_SCROLL:
            self.page_hints.reposition()
        elif kind != HOST_BLUR_BLOCK:
            LOGGER.debug("Ignoring host event %r", kind)
        self.refresh_view()

    def _select_edited_block(self, element: Element) -> None:
        panel = self.panels.from_block(element)
        if panel is None:
            LOGGER.debug("Edited block is outside every registered panel")
            return
        self.panels.focus(panel)
        panel.select(self.host.element_id(element))

    # ---- dispatch ----

    def handle_key(self, event: KeyEvent) -> bool:
        """Dispatch one key event; return whether the host default is suppressed."""
        leader_open = self.leader.active
        if event.is_escape:
            self.matcher.clear()
            self.leader.reset()

        mode = self.mode()

        if mode is Mode.SEARCH:
            if not (event.is_escape or event.is_enter):
                return False
            handled = self.search.handle_key(event)
            self.refresh_view()
            return handled

        if mode is Mode.HINT:
            self._handle_hint_key(event)
            return True

        if mode is Mode.INSERT and not event.is_escape:
            return False

        if self._is_native_shortcut(event, mode):
            return False

        if leader_open:
            # Escape already closed the menu above.
            if not event.is_escape:
                self.leader.advance(event.key)
            return True

        if mode is Mode.NORMAL and self._is_leader_key(event):
            self.matcher.clear()
            self.leader.enter()
            return True

        if self.overlay.help_visible():
            if event.is_escape or event.key == "?":
                self.overlay.hide_help()
            return True

        resolution = self.matcher.resolve(event, mode)
        if resolution is None:
            return False
        if resolution.pending:
            return True
        self.invoke(resolution.command, resolution.args)
        return True

    def _handle_hint_key(self, event: KeyEvent) -> None:
        if event.is_escape:
            self.page_hints.deactivate()
        elif event.is_backspace:
            self.page_hints.backspace()
        elif not event.has_command_modifier and self.page_hints.is_hint_char(event.key):
            self.page_hints.narrow(event.key)
        else:
            return
        if not self.page_hints.active:
            self.refresh_view()

    def _is_native_shortcut(self, event: KeyEvent, mode: Mode) -> bool:
        """Return ``True`` for keys the host should handle itself."""
        if event.is_escape:
            return (
                self.host.query(Selectors.command_bar) is not None
                or self.host.query(Selectors.dialog_overlay) is not None
            )
        if not event.meta:
            return False
        binding = self.matcher.binding_for(event, mode)
        return binding is None or binding.meta is not True

    def _is_leader_key(self, event: KeyEvent) -> bool:
        return (
            self.settings.leader_enabled
            and event.key == self.settings.leader_key
            and not (event.ctrl or event.meta or event.alt or event.shift)
        )

    # ---- command invocation ----

    def invoke(self, name: str, args: tuple[object, ...] = ()) -> None:
        """Run the command called ``name`` with ``args``; unknown names are logged."""
        try:
            fn = self.commands.lookup(name, args)
        except KeyError:
            LOGGER.warning("No command named %r", name)
            return
        self.run_command(name, fn)

    def run_command(self, name: str, fn: Callable[[], object]) -> None:
        """Call ``fn``; log failures and refresh the view once it is done.

        Coroutine results are scheduled, never awaited here, so the next key
        is accepted while the command is still settling.
        """
        try:
            result = fn()
        except NothingToActOn as exc:
            LOGGER.debug("%s: %s", name, exc)
        except Exception:
            LOGGER.exception("Command %r failed", name)
        else:
            if inspect.isawaitable(result):
                self._schedule(name, result)
                return
        self.refresh_view()

    def _schedule(self, name: str, awaitable: Awaitable[object]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._complete(name, awaitable))
            return
        task = loop.create_task(self._complete(name, awaitable))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _complete(self, name: str, awaitable: Awaitable[object]) -> None:
        try:
            await awaitable
        except NothingToActOn as exc:
            LOGGER.debug("%s: %s", name, exc)
        except Exception:
            LOGGER.exception("Command %r failed", name)
        self.refresh_view()

    async def drain(self) -> None:
        """Wait for every scheduled command to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def refresh_view(self) -> None:
        """Redraw the selected-block markers and the mode indicator."""
        self.view.refresh()
        self.overlay.show_mode(self.mode().value)
