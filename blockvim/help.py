"""Keybinding reference shown by the help panel and ``blockvim --keys``.

The overlay renders :data:`KEYBINDING_SECTIONS`; the CLI prints the same
table as plain text through :func:`format_help_lines`.
"""

from __future__ import annotations

from collections.abc import Sequence

HelpSection = tuple[str, tuple[tuple[str, str], ...]]

KEYBINDING_SECTIONS: tuple[HelpSection, ...] = (
    (
        "Navigation",
        (
            ("j / k", "select block down / up"),
            ("H / L", "first / last visible block"),
            ("gg / G", "first / last block"),
            ("Ctrl+U / Ctrl+D", "jump 8 blocks up / down"),
            ("Ctrl+Y / Ctrl+E", "scroll up / down"),
            ("c", "center selected block"),
        ),
    ),
    (
        "Panels",
        (
            ("h / l", "panel left / right"),
            ("Ctrl+W", "close sidebar page"),
        ),
    ),
    (
        "Editing",
        (
            ("i / a", "edit block at start / end"),
            ("o / O", "insert block below / above"),
            ("dd", "delete block"),
            ("z", "toggle fold"),
            ("Cmd+Shift+K / J", "move block up / down"),
            ("u / Ctrl+R", "undo / redo"),
        ),
    ),
    (
        "Clipboard",
        (
            ("y", "copy block"),
            ("Alt+Y", "copy block reference"),
            ("Y", "copy block embed"),
            ("p / P", "paste below / above"),
        ),
    ),
    (
        "Visual",
        (
            ("v", "highlight selected block"),
            ("J / K", "grow highlight down / up"),
            ("d", "cut highlight"),
            ("y", "copy highlight"),
        ),
    ),
    (
        "Hints",
        (
            ("q w e r t b", "click link n of the selected block"),
            ("Shift+hint", "open link in sidebar"),
            ("F", "page hints"),
            ("Ctrl+Shift+F", "page hints, open in sidebar"),
        ),
    ),
    (
        "Search",
        (
            ("/", "search visible blocks"),
            ("n / N", "next / previous match"),
        ),
    ),
    (
        "General",
        (
            ("Esc", "back to normal mode"),
            ("Space", "leader menu (when enabled)"),
            ("?", "toggle this help"),
        ),
    ),
)


def format_help_lines(sections: Sequence[HelpSection] = KEYBINDING_SECTIONS) -> list[str]:
    """Render help sections as aligned plain-text lines."""
    width = max((len(keys) for _title, rows in sections for keys, _desc in rows), default=0)
    lines: list[str] = []
    for title, rows in sections:
        if lines:
            lines.append("")
        lines.append(title.upper())
        for keys, description in rows:
            lines.append(f"  {keys.ljust(width)}  {description}")
    return lines
