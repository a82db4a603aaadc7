"""Exception types raised inside commands and configuration parsing.

None of these escape the dispatcher: commands that raise are caught at the
point of invocation and logged.
"""

from __future__ import annotations


class BlockvimError(Exception):
    """Base class for engine errors."""


class NothingToActOn(BlockvimError):
    """Expected absence: no selected block, highlight, or matching element."""


class LeaderConfigError(BlockvimError, ValueError):
    """A leader tree mapping could not be parsed."""
