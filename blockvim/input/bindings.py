"""Default key binding tables per mode.

Bindings name commands on :class:`blockvim.commands.Commands`; they are
resolved to callables by the engine at dispatch time.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..constants import DEFAULT_BLOCK_HINT_KEYS
from ..mode import Mode
from .key_registry import KeyBinding
from .sequence import ModeKeymap, SequenceBinding

NORMAL_SEQUENCES: tuple[SequenceBinding, ...] = (
    SequenceBinding(("g", "g"), "select_first_block"),
    SequenceBinding(("d", "d"), "delete_block"),
)

NORMAL_BINDINGS: tuple[KeyBinding, ...] = (
    # Navigation
    KeyBinding(("k",), "select_block_up", shift=False, ctrl=False),
    KeyBinding(("j",), "select_block_down", shift=False, ctrl=False),
    KeyBinding(("h",), "select_first_visible_block", shift=True),
    KeyBinding(("l",), "select_last_visible_block", shift=True),
    KeyBinding(("g",), "select_last_block", shift=True),
    KeyBinding(("u",), "select_many_blocks_up", ctrl=True),
    KeyBinding(("d",), "select_many_blocks_down", ctrl=True),
    # Panels
    KeyBinding(("h",), "select_panel_left", shift=False),
    KeyBinding(("l",), "select_panel_right", shift=False),
    # Insert
    KeyBinding(("i",), "edit_block", shift=False),
    KeyBinding(("a",), "edit_block_from_end"),
    KeyBinding(("o",), "insert_block_before", shift=True),
    KeyBinding(("o",), "insert_block_after", shift=False),
    # Visual
    KeyBinding(("v",), "highlight_selected_block", shift=False),
    # Clipboard
    KeyBinding(("p",), "paste", shift=False),
    KeyBinding(("p",), "paste_before", shift=True),
    KeyBinding(("y",), "copy_selected_block", shift=False, ctrl=False, alt=False),
    KeyBinding(("y",), "copy_block_reference", alt=True),
    KeyBinding(("y",), "copy_block_embed", shift=True),
    # History
    KeyBinding(("u",), "undo", ctrl=False),
    KeyBinding(("r",), "redo", ctrl=True),
    # View
    KeyBinding(("z",), "toggle_fold", ctrl=False, meta=False),
    KeyBinding(("c",), "center_current_block", shift=False, ctrl=False),
    KeyBinding(("?",), "toggle_help", exact=True),
    # Search
    KeyBinding(("/",), "enter_search", exact=True),
    KeyBinding(("n",), "next_match", shift=False, ctrl=False),
    KeyBinding(("n",), "previous_match", shift=True, ctrl=False),
    # Page hints
    KeyBinding(("f",), "show_page_hints", shift=True, ctrl=False),
    KeyBinding(("f",), "show_page_hints_in_sidebar", shift=True, ctrl=True),
)

VISUAL_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding(("k",), "select_block_up", shift=False),
    KeyBinding(("j",), "select_block_down", shift=False),
    KeyBinding(("k",), "grow_highlight_up", shift=True),
    KeyBinding(("j",), "grow_highlight_down", shift=True),
    KeyBinding(("y",), "copy_selected_block"),
    KeyBinding(("d",), "cut_highlight"),
)

NORMAL_OR_VISUAL_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding(("y",), "scroll_up", ctrl=True),
    KeyBinding(("e",), "scroll_down", ctrl=True),
    KeyBinding(("k",), "move_block_up", meta=True, shift=True),
    KeyBinding(("j",), "move_block_down", meta=True, shift=True),
)

ANY_MODE_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding(("escape",), "return_to_normal_mode"),
    KeyBinding(("w",), "close_sidebar_page", ctrl=True),
)


def block_hint_bindings(hint_keys: Sequence[str]) -> tuple[KeyBinding, ...]:
    """Bindings clicking the n-th link of the selected block."""
    bindings: list[KeyBinding] = []
    for index, key in enumerate(hint_keys):
        bindings.append(KeyBinding((key,), "click_hint", (index,), shift=False, ctrl=False))
        bindings.append(KeyBinding((key,), "shift_click_hint", (index,), shift=True, ctrl=False))
        bindings.append(KeyBinding((key,), "ctrl_shift_click_hint", (index,), shift=True, ctrl=True))
    return tuple(bindings)


def shadowed_hint_keys() -> frozenset[str]:
    """Keys whose Normal-mode bindings or sequence prefixes would hide a block hint."""
    keys = {sequence.tokens[0] for sequence in NORMAL_SEQUENCES}
    for binding in NORMAL_BINDINGS:
        if not (binding.ctrl or binding.alt or binding.meta):
            keys.update(key.lower() for key in binding.keys)
    return frozenset(keys)


def build_keymaps(block_hint_keys: Sequence[str] = DEFAULT_BLOCK_HINT_KEYS) -> dict[Mode, ModeKeymap]:
    """Assemble the per-mode keymaps consulted by the sequence matcher."""
    normal = ModeKeymap()
    normal.singles.register_bindings(
        *NORMAL_BINDINGS,
        *block_hint_bindings(block_hint_keys),
        *NORMAL_OR_VISUAL_BINDINGS,
        *ANY_MODE_BINDINGS,
    )
    for sequence in NORMAL_SEQUENCES:
        normal.add_sequence(sequence)

    visual = ModeKeymap()
    visual.singles.register_bindings(*VISUAL_BINDINGS, *NORMAL_OR_VISUAL_BINDINGS, *ANY_MODE_BINDINGS)

    insert = ModeKeymap()
    insert.singles.register_bindings(*ANY_MODE_BINDINGS)

    return {Mode.NORMAL: normal, Mode.VISUAL: visual, Mode.INSERT: insert}
