"""Addressing model: panels, blocks, selection and visibility."""

from .geometry import in_viewport, is_visible, scroll_overflow
from .panel import Panel, clamp
from .registry import PanelRegistry

__all__ = [
    "Panel",
    "PanelRegistry",
    "clamp",
    "in_viewport",
    "is_visible",
    "scroll_overflow",
]
