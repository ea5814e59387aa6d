"""Unified configuration layer for the gateway client.

Sources are merged in a predictable order (later wins):
    1. Built-in defaults (:mod:`gateway_client.config.defaults`)
    2. Optional config file (JSON or YAML) named by ``GATEWAY_CONFIG_FILE``
    3. Environment variables (``GATEWAY_BASE_URL``, ``GATEWAY_CHAT_PATH``,
       ``GATEWAY_ACCESS_TOKEN``, ``GATEWAY_DB_PATH``,
       ``GATEWAY_UNKNOWN_TIER_POLICY``)
    4. Explicit overrides passed by the caller (``None`` values ignored)

Config file example::

    base_url: https://project.supabase.co
    chat_path: /functions/v1/v1-chat
    unknown_tier_policy: restrictive

Public API
----------
* get_gateway_config(overrides: dict | None = None) -> dict
* get_chat_endpoint(config: dict | None = None) -> str
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional
import os

import yaml

from .defaults import (
    GATEWAY_DEFAULT_BASE_URL,
    GATEWAY_DEFAULT_CHAT_PATH,
    UNKNOWN_TIER_POLICY_DEFAULT,
)
from .env import CONFIG_FILE_ENV, env_overrides


DEFAULTS: Dict[str, Any] = {
    "base_url": GATEWAY_DEFAULT_BASE_URL,
    "chat_path": GATEWAY_DEFAULT_CHAT_PATH,
    "db_path": None,
    "unknown_tier_policy": UNKNOWN_TIER_POLICY_DEFAULT,
}

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def _load_config_file() -> Dict[str, Any]:
    """Load the file named by ``GATEWAY_CONFIG_FILE`` (cached per path).

    JSON is tried first, then YAML. Missing files and non-mapping documents
    yield an empty mapping.
    """
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path).expanduser()
    data: Any = {}
    if p.is_file():
        text = p.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE[path] = data
    return data


def clear_config_cache() -> None:
    """Forget cached config files (tests and long-lived processes)."""
    _FILE_CACHE.clear()


def get_gateway_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged gateway configuration.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    ``access_token`` only appears when set by the file, env or overrides.
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_config_file()
    cfg |= env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_chat_endpoint(config: Optional[Dict[str, Any]] = None) -> str:
    """Join ``base_url`` and ``chat_path`` into the streaming chat URL."""
    cfg = config if config is not None else get_gateway_config()
    base = str(cfg.get("base_url") or GATEWAY_DEFAULT_BASE_URL).rstrip("/")
    path = str(cfg.get("chat_path") or GATEWAY_DEFAULT_CHAT_PATH)
    return f"{base}/{path.lstrip('/')}"


__all__ = [
    "get_gateway_config",
    "get_chat_endpoint",
    "clear_config_cache",
    "DEFAULTS",
]
