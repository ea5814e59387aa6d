"""
Error codes shared by ``GatewayError``, log events and the CLI.

Values are lowercase snake_case strings; they appear verbatim in log lines
(``error_code``) and in ``gateway-cli`` error output.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Failure category of a session or lookup."""

    # session outcomes
    AUTH = "auth"
    CANCELLED = "cancelled"
    INTERNAL = "internal"
    # transport and upstream status
    TRANSPORT = "transport"
    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    UNAVAILABLE = "unavailable"
    SERVER_ERROR = "server_error"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    # payload and access layer
    MALFORMED_FRAME = "malformed_frame"
    LOOKUP = "lookup"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
