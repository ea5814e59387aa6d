"""Pooled httpx clients.

Sessions share one ``httpx.Client`` per ``(base_url, purpose)`` key, so
concurrent streams reuse connections instead of each opening its own
client. Timeouts come from :func:`get_timeout_config` at creation time;
connection limits and the user agent from ``config.defaults``.

``close_all_clients`` closes and forgets every pooled client. It is also
registered with ``atexit``.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ...config.defaults import HTTP_MAX_CONNECTIONS, HTTP_MAX_KEEPALIVE_CONNECTIONS, HTTP_USER_AGENT
from ..timeouts import get_timeout_config

PoolKey = Tuple[Optional[str], str]

_CLIENTS: Dict[PoolKey, httpx.Client] = {}
_LOCK = threading.RLock()


def _new_client(base_url: Optional[str]) -> httpx.Client:
    options = {
        "timeout": get_timeout_config().to_httpx(),
        "limits": httpx.Limits(
            max_connections=HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=HTTP_MAX_KEEPALIVE_CONNECTIONS,
        ),
        "headers": {"User-Agent": HTTP_USER_AGENT},
    }
    if base_url:
        options["base_url"] = base_url
    return httpx.Client(**options)


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return the pooled client for ``(base_url, purpose)``, creating it once.

    ``purpose`` separates pools that should not share connections, e.g.
    ``"stream"`` for long-lived event streams.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is None:
        with _LOCK:
            client = _CLIENTS.get(key)
            if client is None:
                client = _CLIENTS[key] = _new_client(base_url)
    return client


def close_all_clients() -> None:
    with _LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for client in clients:
        try:
            client.close()
        except Exception:  # nosec B110 - shutdown path, nothing left to report to
            continue


atexit.register(close_all_clients)

__all__ = ["PoolKey", "get_httpx_client", "close_all_clients"]
