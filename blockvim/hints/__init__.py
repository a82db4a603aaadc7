"""Hint labels for selecting visible targets by typing short codes."""

from .labels import generate_hint_labels
from .page_hints import HintEntry, NarrowResult, PageHints

__all__ = ["HintEntry", "NarrowResult", "PageHints", "generate_hint_labels"]
