"""Leader-key command tree and its menu state."""

from .defaults import DEFAULT_LEADER_LAYOUT, default_leader_tree
from .menu import LeaderMenu, LeaderOutcome
from .tree import (
    CallableLeaf,
    Group,
    LeaderNode,
    NamedLeaf,
    format_leader_tree,
    menu_entries,
    merge_trees,
    parse_leader_tree,
)

__all__ = [
    "CallableLeaf",
    "DEFAULT_LEADER_LAYOUT",
    "Group",
    "LeaderMenu",
    "LeaderNode",
    "LeaderOutcome",
    "NamedLeaf",
    "default_leader_tree",
    "format_leader_tree",
    "menu_entries",
    "merge_trees",
    "parse_leader_tree",
]
