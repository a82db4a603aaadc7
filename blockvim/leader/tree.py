"""Leader command tree: tagged node variants, parsing and deep merge.

A tree is a :class:`Group` whose children are groups or leaves. Leaves
either hold a callable directly or name a command in an external registry.
Trees arrive as plain mappings (defaults and user configuration):

    {"b": {"name": "+block", "keys": {"y": {"name": "copy", "command": "copy_selected_block"}}}}

Groups carry ``keys``; leaves carry ``command`` (a registry name) or
``action`` (a callable).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Union

from ..errors import LeaderConfigError

ROOT_NAME = "+leader"


@dataclass(frozen=True)
class CallableLeaf:
    name: str
    fn: Callable[[], object]


@dataclass(frozen=True)
class NamedLeaf:
    name: str
    command: str


@dataclass(frozen=True)
class Group:
    """Named mapping of keys to child nodes.

    ``name`` is ``None`` for groups parsed from a partial tree that did not
    set one; merging keeps the other side's name in that case.
    """

    name: str | None
    children: dict[str, LeaderNode] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.name if self.name is not None else "+group"


LeaderNode = Union[Group, CallableLeaf, NamedLeaf]


def node_label(node: LeaderNode) -> str:
    """Display label for any node kind."""
    if isinstance(node, Group):
        return node.label
    return node.name


def parse_node(key: str, raw: object) -> LeaderNode:
    """Parse one mapping-shaped node, raising ``LeaderConfigError`` when malformed."""
    if isinstance(raw, (Group, CallableLeaf, NamedLeaf)):
        return raw
    if callable(raw):
        return CallableLeaf(name=getattr(raw, "__name__", key), fn=raw)
    if not isinstance(raw, Mapping):
        raise LeaderConfigError(f"Leader key {key!r}: expected a mapping, got {type(raw).__name__}")

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        raise LeaderConfigError(f"Leader key {key!r}: name must be a string")

    if "keys" in raw:
        return Group(name=name, children=parse_children(raw["keys"], path=key))

    action = raw.get("action")
    if action is not None:
        if not callable(action):
            raise LeaderConfigError(f"Leader key {key!r}: action must be callable")
        return CallableLeaf(name=name or key, fn=action)

    command = raw.get("command")
    if isinstance(command, str) and command:
        return NamedLeaf(name=name or command, command=command)

    raise LeaderConfigError(f"Leader key {key!r}: node needs 'keys', 'action' or 'command'")


def parse_children(raw: object, path: str = "") -> dict[str, LeaderNode]:
    """Parse a ``keys`` mapping of single-character keys to nodes."""
    if not isinstance(raw, Mapping):
        raise LeaderConfigError(f"Leader group {path or 'root'!r}: 'keys' must be a mapping")
    children: dict[str, LeaderNode] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or len(key) != 1:
            raise LeaderConfigError(f"Leader group {path or 'root'!r}: keys must be single characters, got {key!r}")
        children[key] = parse_node(f"{path}{key}", value)
    return children


def parse_leader_tree(raw: Mapping[str, object], name: str | None = ROOT_NAME) -> Group:
    """Parse a root-level mapping of ``key -> node`` into a tree."""
    return Group(name=name, children=parse_children(raw))


def merge_trees(base: Group, override: Group) -> Group:
    """Deep-merge ``override`` over ``base``.

    Leaves in ``override`` replace whatever ``base`` has at the same key;
    groups present on both sides merge recursively; keys present on only one
    side survive unchanged. Neither input is mutated.
    """
    children = dict(base.children)
    for key, node in override.children.items():
        existing = children.get(key)
        if isinstance(node, Group) and isinstance(existing, Group):
            children[key] = merge_trees(existing, node)
        else:
            children[key] = node
    name = override.name if override.name is not None else base.name
    return Group(name=name, children=children)


def menu_entries(group: Group) -> list[tuple[str, str, bool]]:
    """Return ``(key, label, is_group)`` rows for a which-key listing."""
    return [(key, node_label(node), isinstance(node, Group)) for key, node in group.children.items()]


def format_leader_tree(group: Group, indent: str = "") -> list[str]:
    """Render ``group`` as indented ``key  label`` lines, depth first."""
    lines: list[str] = []
    for key, node in group.children.items():
        if isinstance(node, Group):
            lines.append(f"{indent}{key}  {node.label}")
            lines.extend(format_leader_tree(node, indent + "  "))
        elif isinstance(node, NamedLeaf):
            lines.append(f"{indent}{key}  {node.name} ({node.command})")
        else:
            lines.append(f"{indent}{key}  {node.name}")
    return lines
