"""Library-wide settings, resolved once when soupy is imported.

``PATTERNS_ENABLED`` decides whether selectors that match with regular
expressions can be built at all. ``MAX_DEPTH`` bounds tree depth and
ancestor walks so a cyclic backend tree fails instead of looping.
"""

from __future__ import annotations

import os

_FALSE_VALUES: frozenset[str] = frozenset({"0", "false", "no", "off"})


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = int(raw)
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return value


PATTERNS_ENABLED: bool = _env_flag("SOUPY_PATTERNS", True)
MAX_DEPTH: int = _env_int("SOUPY_MAX_DEPTH", 10_000)
