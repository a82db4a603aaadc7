"""Built-in leader tree.

Leaves name commands registered by :meth:`blockvim.commands.Commands.registry`.
"""

from __future__ import annotations

from .tree import Group, parse_leader_tree

DEFAULT_LEADER_LAYOUT: dict[str, object] = {
    "b": {
        "name": "+block",
        "keys": {
            "y": {"name": "copy block", "command": "copy_selected_block"},
            "r": {"name": "copy reference", "command": "copy_block_reference"},
            "e": {"name": "copy embed", "command": "copy_block_embed"},
            "d": {"name": "delete block", "command": "delete_block"},
            "z": {"name": "toggle fold", "command": "toggle_fold"},
            "o": {"name": "insert below", "command": "insert_block_after"},
            "O": {"name": "insert above", "command": "insert_block_before"},
        },
    },
    "w": {
        "name": "+panel",
        "keys": {
            "h": {"name": "panel left", "command": "select_panel_left"},
            "l": {"name": "panel right", "command": "select_panel_right"},
            "m": {"name": "main panel", "command": "focus_main_panel"},
            "c": {"name": "close sidebar page", "command": "close_sidebar_page"},
        },
    },
    "s": {
        "name": "+search",
        "keys": {
            "s": {"name": "search", "command": "enter_search"},
            "n": {"name": "next match", "command": "next_match"},
            "N": {"name": "previous match", "command": "previous_match"},
        },
    },
    "f": {"name": "page hints", "command": "show_page_hints"},
    "F": {"name": "page hints (sidebar)", "command": "show_page_hints_in_sidebar"},
    "u": {"name": "undo", "command": "undo"},
    "r": {"name": "redo", "command": "redo"},
    "?": {"name": "help", "command": "toggle_help"},
}


def default_leader_tree() -> Group:
    """Return a fresh copy of the built-in leader tree."""
    return parse_leader_tree(DEFAULT_LEADER_LAYOUT)
