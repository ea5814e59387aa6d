"""
Structured gateway error exception types.

``GatewayError`` wraps any failure crossing the client boundary with a
normalized :class:`ErrorCode`. The subclasses name the categories callers
branch on; each only changes the default code.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class GatewayError(Exception):
    """Represents a structured gateway error with a normalized error code.

    Attributes:
        message: Human-readable error message. For upstream HTTP failures this
            is the gateway's ``error`` field verbatim when one was returned.
        code: Normalized :class:`ErrorCode` classification for the failure.
        model: Optional model identifier associated with the failure.
        status_code: HTTP status when the failure came from a response.
        retryable: Hint for caller-side retry logic (not authoritative).
        raw: Optional original exception for diagnostics.
    """

    message: str
    code: ErrorCode = ErrorCode.UNKNOWN
    model: Optional[str] = None
    status_code: Optional[int] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class AuthenticationError(GatewayError):
    """No usable access credential was available when a session opened."""

    code: ErrorCode = ErrorCode.AUTH


@dataclass
class TransportError(GatewayError):
    """Non-success HTTP status or a network failure while opening/reading."""

    code: ErrorCode = ErrorCode.TRANSPORT


@dataclass
class MalformedFrameError(GatewayError):
    """A single event payload could not be parsed; recovered locally."""

    code: ErrorCode = ErrorCode.MALFORMED_FRAME


@dataclass
class LookupFailure(GatewayError):
    """A quota or model catalog read failed; callers degrade to unknown."""

    code: ErrorCode = ErrorCode.LOOKUP


__all__ = [
    "GatewayError",
    "AuthenticationError",
    "TransportError",
    "MalformedFrameError",
    "LookupFailure",
]
