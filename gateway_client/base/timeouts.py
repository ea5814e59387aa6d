"""Centralized timeout configuration for gateway HTTP calls.

All network timeouts used by the client come from :func:`get_timeout_config`;
no module hard-codes its own numbers. Values map onto ``httpx.Timeout`` via
:meth:`TimeoutConfig.to_httpx`.

Environment overrides (all optional, positive floats, seconds):
    GATEWAY_TIMEOUT_CONNECT_SECONDS  establishing the connection
    GATEWAY_TIMEOUT_READ_SECONDS     idle gap allowed between two stream reads
    GATEWAY_TIMEOUT_HTTP_SECONDS     writes and pool acquisition

The parsed config is cached and recomputed only when one of the variables
changes, so tests can adjust them with ``monkeypatch.setenv``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

import httpx

from ..config.defaults import (
    TIMEOUT_CONNECT_SECONDS,
    TIMEOUT_HTTP_SECONDS,
    TIMEOUT_READ_SECONDS,
)

_ENV_NAMES = (
    "GATEWAY_TIMEOUT_CONNECT_SECONDS",
    "GATEWAY_TIMEOUT_READ_SECONDS",
    "GATEWAY_TIMEOUT_HTTP_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the connection.
        read_timeout_seconds: Maximum idle time waiting for the next chunk of
            a streaming response (not a cap on total stream duration).
        http_timeout_seconds: Write and connection-pool timeout.
    """

    connect_timeout_seconds: float = TIMEOUT_CONNECT_SECONDS
    read_timeout_seconds: float = TIMEOUT_READ_SECONDS
    http_timeout_seconds: float = TIMEOUT_HTTP_SECONDS

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.http_timeout_seconds,
            pool=self.http_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: Tuple[str, ...] | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float; unset, invalid or non-positive gives ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:  # pragma: no cover
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = tuple(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], TIMEOUT_CONNECT_SECONDS),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], TIMEOUT_READ_SECONDS),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[2], TIMEOUT_HTTP_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
