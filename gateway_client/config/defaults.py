"""gateway_client.config.defaults
===============================

Small, stable default values used across the gateway client. Every value can
be overridden through the config file, environment variables, or explicit
overrides (see :func:`gateway_client.config.get_gateway_config`).

This module performs no I/O and imports nothing from the rest of the package.
"""

from __future__ import annotations

# ---- Gateway endpoint ----
GATEWAY_DEFAULT_BASE_URL = "http://localhost:54321"
GATEWAY_DEFAULT_CHAT_PATH = "/functions/v1/v1-chat"

# Wire framing
SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"

# Message used when a non-success response carries no ``error`` field.
GATEWAY_GENERIC_ERROR_MESSAGE = "API request failed"

# ---- Timeouts (seconds) ----
TIMEOUT_CONNECT_SECONDS = 10.0
# Idle time allowed between two network reads of a stream.
TIMEOUT_READ_SECONDS = 60.0
TIMEOUT_HTTP_SECONDS = 30.0

# ---- HTTP pool ----
HTTP_MAX_CONNECTIONS = 20
HTTP_MAX_KEEPALIVE_CONNECTIONS = 10
HTTP_USER_AGENT = "gateway-client/0.1"

# ---- Access / tiers ----
# Ordered least to most privileged.
TIER_ORDER = ("free", "pro", "max")
DEFAULT_TIER = "free"
# Credits granted per reset window when only the tier is known.
TIER_DEFAULT_CREDIT_LIMITS = {
    "free": 5000,
    "pro": 50000,
    "max": 500000,
}
UNKNOWN_TIER_POLICY_DEFAULT = "permissive"
# Length of one credit window; an elapsed window reads as a full balance.
QUOTA_RESET_PERIOD_DAYS = 30

# ---- SQLite (access repositories) ----
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"
SQLITE_DEFAULT_DB_RELPATH = ".gateway_client/access.db"

__all__ = [
    "GATEWAY_DEFAULT_BASE_URL",
    "GATEWAY_DEFAULT_CHAT_PATH",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
    "GATEWAY_GENERIC_ERROR_MESSAGE",
    "TIMEOUT_CONNECT_SECONDS",
    "TIMEOUT_READ_SECONDS",
    "TIMEOUT_HTTP_SECONDS",
    "HTTP_MAX_CONNECTIONS",
    "HTTP_MAX_KEEPALIVE_CONNECTIONS",
    "HTTP_USER_AGENT",
    "TIER_ORDER",
    "DEFAULT_TIER",
    "TIER_DEFAULT_CREDIT_LIMITS",
    "UNKNOWN_TIER_POLICY_DEFAULT",
    "QUOTA_RESET_PERIOD_DAYS",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
    "SQLITE_DEFAULT_DB_RELPATH",
]
