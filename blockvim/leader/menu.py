"""Leader-key menu state machine.

Entering puts the cursor at the tree root. Each key either descends into a
group, runs a leaf, or cancels. Any wrong key cancels: there is no
backtracking and no lookahead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum

from ..constants import LEADER_PATH_ROOT, WHICH_KEY_DELAY_SECONDS
from ..host import Overlay
from .tree import CallableLeaf, Group, NamedLeaf, menu_entries

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[str, Callable[[], object]], None]


class LeaderOutcome(str, Enum):
    DESCENDED = "descended"
    EXECUTED = "executed"
    CANCELLED = "cancelled"


def _call_directly(_name: str, fn: Callable[[], object]) -> None:
    fn()


class LeaderMenu:
    def __init__(
        self,
        tree: Group,
        registry: Mapping[str, Callable[[], object]],
        overlay: Overlay,
        *,
        run_command: CommandRunner = _call_directly,
        popup_delay_seconds: float = WHICH_KEY_DELAY_SECONDS,
    ) -> None:
        self.tree = tree
        self.registry = registry
        self.overlay = overlay
        self._run_command = run_command
        self.popup_delay_seconds = popup_delay_seconds
        self.active = False
        self.current: Group = tree
        self.path: list[str] = []

    def set_tree(self, tree: Group) -> None:
        """Swap in a new tree and close the menu."""
        self.tree = tree
        self.reset()

    def enter(self) -> None:
        """Open the menu at the tree root."""
        self.active = True
        self.current = self.tree
        self.path = [LEADER_PATH_ROOT]
        self.overlay.show_which_key(
            list(self.path),
            menu_entries(self.current),
            delay_seconds=self.popup_delay_seconds,
        )

    def reset(self) -> None:
        """Close the menu and hide the which-key popup."""
        was_active = self.active
        self.active = False
        self.current = self.tree
        self.path = []
        if was_active:
            self.overlay.hide_which_key()

    def advance(self, key: str) -> LeaderOutcome:
        """Consume one key while the menu is open."""
        node = self.current.children.get(key)
        if node is None:
            self.reset()
            return LeaderOutcome.CANCELLED

        if isinstance(node, Group):
            self.current = node
            self.path.append(key)
            self.overlay.show_which_key(list(self.path), menu_entries(node), delay_seconds=0.0)
            return LeaderOutcome.DESCENDED

        if isinstance(node, NamedLeaf):
            fn = self.registry.get(node.command)
            if fn is None:
                LOGGER.warning("Leader command %r is not registered", node.command)
                self.reset()
                return LeaderOutcome.CANCELLED
        else:
            fn = node.fn

        label = node.name if isinstance(node, CallableLeaf) else node.command
        # Reset first so a leaf that reopens the menu or enters another mode
        # starts from a clean state.
        self.reset()
        try:
            self._run_command(label, fn)
        except Exception:
            LOGGER.exception("Leader command %r failed", label)
        return LeaderOutcome.EXECUTED
