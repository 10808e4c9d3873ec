"""Internal helpers for development-time feature flags."""

from __future__ import annotations

import os

__all__ = ["env_flag"]

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def env_flag(name: str, *, default: bool = False) -> bool | None:
    """Parse a boolean environment toggle.

    Returns ``default`` when the variable is unset and ``None`` when it holds
    something unrecognizable, leaving the error message to the caller.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return None
