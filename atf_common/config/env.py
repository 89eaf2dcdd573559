"""Readers for ``ATF_*`` environment variables."""

from __future__ import annotations

import os
from typing import Mapping

ENV_PREFIX = "ATF_"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def env_name(key: str) -> str:
    """``"log_json"`` -> ``"ATF_LOG_JSON"``; already prefixed names pass through."""
    key = key.upper()
    return key if key.startswith(ENV_PREFIX) else f"{ENV_PREFIX}{key}"


def read_env(key: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Stripped value of the variable, or None when unset or blank."""
    env = os.environ if environ is None else environ
    raw = env.get(env_name(key))
    if raw is None:
        return None
    return raw.strip() or None


def env_flag(key: str, environ: Mapping[str, str] | None = None) -> bool | None:
    """Tri-state flag: True/False for recognised spellings, otherwise None."""
    raw = read_env(key, environ)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return None

