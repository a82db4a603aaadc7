"""JSON settings file helpers.

Holds leader options, timing, hint alphabets and an optional partial leader
tree. A missing or malformed file, or any single invalid value, falls back
to defaults. The file is only ever read.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .constants import (
    DEFAULT_BLOCK_HINT_KEYS,
    EXTENSION_ID,
    HINT_CHARS,
    SEQUENCE_TIMEOUT_SECONDS,
    SETTLE_DELAY_SECONDS,
    WHICH_KEY_DELAY_SECONDS,
)
from .errors import LeaderConfigError
from .input.bindings import shadowed_hint_keys
from .leader.tree import Group, parse_leader_tree

LOGGER = logging.getLogger(__name__)

APP_NAME = EXTENSION_ID
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class EngineSettings:
    leader_enabled: bool = False
    leader_key: str = " "
    sequence_timeout_seconds: float = SEQUENCE_TIMEOUT_SECONDS
    which_key_delay_seconds: float = WHICH_KEY_DELAY_SECONDS
    hint_chars: str = HINT_CHARS
    block_hint_keys: tuple[str, ...] = DEFAULT_BLOCK_HINT_KEYS
    settle_delay_seconds: float = SETTLE_DELAY_SECONDS


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON settings object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _rejected(key: str, value: object) -> None:
    """Log a rejected setting; the caller falls back to its default."""
    LOGGER.warning("Ignoring invalid %s setting: %r", key, value)


def _milliseconds(data: Mapping[str, object], key: str, default: float, *, allow_zero: bool) -> float:
    """Read an integer millisecond setting as seconds."""
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0 or (value == 0 and not allow_zero):
        _rejected(key, value)
        return default
    return value / 1000.0


def _flag(data: Mapping[str, object], key: str, default: bool) -> bool:
    """Read a boolean setting; anything but a JSON boolean is rejected."""
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, bool):
        _rejected(key, value)
        return default
    return value


def _single_char(value: object) -> bool:
    """Return whether ``value`` is a one-character string."""
    return isinstance(value, str) and len(value) == 1


def _hint_chars(data: Mapping[str, object]) -> str:
    """Read the page hint alphabet: at least two distinct, case-folded characters."""
    value = data.get("hint_chars")
    if value is None:
        return HINT_CHARS
    if not isinstance(value, str):
        _rejected("hint_chars", value)
        return HINT_CHARS
    chars = value.lower()
    if len(chars) < 2 or len(set(chars)) != len(chars):
        _rejected("hint_chars", value)
        return HINT_CHARS
    return chars


def _block_hint_keys(data: Mapping[str, object]) -> tuple[str, ...]:
    """Read the block link hint keys as distinct lowercase characters.

    A key already bound in Normal mode would shadow its hint binding, so a
    list containing one is rejected as a whole.
    """
    value = data.get("block_hint_keys")
    if value is None:
        return DEFAULT_BLOCK_HINT_KEYS
    if not isinstance(value, list) or not value or not all(_single_char(key) for key in value):
        _rejected("block_hint_keys", value)
        return DEFAULT_BLOCK_HINT_KEYS
    keys = tuple(key.lower() for key in value)
    if len(set(keys)) != len(keys):
        _rejected("block_hint_keys", value)
        return DEFAULT_BLOCK_HINT_KEYS
    shadowed = sorted(set(keys) & shadowed_hint_keys())
    if shadowed:
        LOGGER.warning("Ignoring block_hint_keys %r: %s already bound in normal mode", value, ", ".join(shadowed))
        return DEFAULT_BLOCK_HINT_KEYS
    return keys


def settings_from_config(data: Mapping[str, object]) -> EngineSettings:
    """Build settings from a loaded config mapping, key by key."""
    leader_key = data.get("leader_key", " ")
    if not _single_char(leader_key):
        _rejected("leader_key", leader_key)
        leader_key = " "

    return EngineSettings(
        leader_enabled=_flag(data, "leader_enabled", False),
        leader_key=leader_key,
        sequence_timeout_seconds=_milliseconds(
            data, "sequence_timeout_ms", SEQUENCE_TIMEOUT_SECONDS, allow_zero=False
        ),
        which_key_delay_seconds=_milliseconds(
            data, "which_key_delay_ms", WHICH_KEY_DELAY_SECONDS, allow_zero=True
        ),
        hint_chars=_hint_chars(data),
        block_hint_keys=_block_hint_keys(data),
        settle_delay_seconds=_milliseconds(data, "settle_delay_ms", SETTLE_DELAY_SECONDS, allow_zero=True),
    )


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load and validate the settings file at ``path`` (default: ``CONFIG_PATH``)."""
    return settings_from_config(load_config(path))


def user_leader_tree(data: Mapping[str, object]) -> Group | None:
    """Parse the ``leader`` object, or return ``None`` when absent or invalid."""
    raw = data.get("leader")
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        _rejected("leader", raw)
        return None
    try:
        return parse_leader_tree(raw, name=None)
    except LeaderConfigError as exc:
        LOGGER.warning("Ignoring user leader tree: %s", exc)
        return None


async def load_user_leader_tree(path: Path | None = None) -> Group | None:
    """User configuration loader for :meth:`blockvim.engine.Engine.apply_user_config`."""
    return user_leader_tree(load_config(path))
