"""Command-line front door for blockvim.

The engine itself runs inside a host editor; the CLI only inspects what it
would be configured with: the keybinding reference and the leader tree
after merging the user's settings file over the defaults.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from . import config
from .help import format_help_lines
from .leader import default_leader_tree, format_leader_tree, merge_trees


def render_leader_tree(config_path: Path | None) -> list[str]:
    """Return the merged leader tree as indented lines."""
    tree = default_leader_tree()
    user_tree = asyncio.run(config.load_user_leader_tree(config_path))
    if user_tree is not None:
        tree = merge_trees(tree, user_tree)
    settings = config.load_settings(config_path)
    state = "enabled" if settings.leader_enabled else "disabled"
    key = "SPC" if settings.leader_key == " " else settings.leader_key
    return [f"leader {key} ({state})", *format_leader_tree(tree, indent="  ")]


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and print the requested reference."""
    parser = argparse.ArgumentParser(
        prog="blockvim",
        description="Inspect blockvim keybindings and the configured leader menu.",
    )
    parser.add_argument("--keys", action="store_true", help="Print the keybinding reference.")
    parser.add_argument("--leader", action="store_true", help="Print the merged leader tree.")
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help=f"Settings file (default: {config.CONFIG_PATH}).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not (args.keys or args.leader):
        parser.print_help()
        return

    config_path = Path(args.config) if args.config is not None else None
    if config_path is not None and not config_path.exists():
        raise SystemExit(f"Config not found: {config_path}")

    lines: list[str] = []
    if args.keys:
        lines.extend(format_help_lines())
    if args.leader:
        if lines:
            lines.append("")
        lines.extend(render_leader_tree(config_path))
    sys.stdout.write("\n".join(lines) + "\n")


if __name__ == "__main__":
    main()
