"""Hint label generation."""

from __future__ import annotations

from ..constants import HINT_CHARS


def generate_hint_labels(count: int, chars: str = HINT_CHARS) -> list[str]:
    """Return up to ``count`` prefix-free labels over ``chars``.

    Up to ``len(chars)`` targets get one character each. Beyond that every
    target gets two characters from the cross product, first character in
    the outer loop. At most ``len(chars) ** 2`` labels are produced; targets
    past that are simply left unlabeled.
    """
    base = len(chars)
    if count <= 0 or base == 0:
        return []
    if count <= base:
        return list(chars[:count])

    labels: list[str] = []
    for first in chars:
        for second in chars:
            if len(labels) >= count:
                return labels
            labels.append(first + second)
    return labels
