"""gateway_client.config.env
==========================

Environment variable names understood by the gateway client, and small
helpers for reading them.

Helpers never raise on unset variables; callers decide how to fall back.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

# Config field -> environment variable
ENV_MAP: Dict[str, str] = {
    "base_url": "GATEWAY_BASE_URL",
    "chat_path": "GATEWAY_CHAT_PATH",
    "access_token": "GATEWAY_ACCESS_TOKEN",
    "db_path": "GATEWAY_DB_PATH",
    "unknown_tier_policy": "GATEWAY_UNKNOWN_TIER_POLICY",
}

CONFIG_FILE_ENV = "GATEWAY_CONFIG_FILE"


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a real secret.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme`` or
    ``example``, or starts with ``test_``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def env_overrides() -> Dict[str, str]:
    """Return config fields present in the process environment."""
    out: Dict[str, str] = {}
    for field, name in ENV_MAP.items():
        val = os.getenv(name)
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


def resolve_access_token() -> Optional[str]:
    """Return the bearer token from ``GATEWAY_ACCESS_TOKEN``.

    Empty values and placeholders resolve to ``None`` so the controller fails
    fast with an authentication error instead of sending a bogus header.
    """
    token = os.getenv(ENV_MAP["access_token"])
    if not token or not token.strip() or is_placeholder(token):
        return None
    return token.strip()


__all__ = [
    "ENV_MAP",
    "CONFIG_FILE_ENV",
    "is_placeholder",
    "env_overrides",
    "resolve_access_token",
]
