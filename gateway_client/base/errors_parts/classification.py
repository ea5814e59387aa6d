"""
Map exceptions and HTTP statuses onto :class:`ErrorCode`.

Used by the stream controller for failures while opening or reading the
gateway stream, and for non-2xx responses.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

import httpx

from .error_code import ErrorCode
from .gateway_error import GatewayError

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

_TIMEOUT_TYPES = (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)

# First matching rule wins; "rate" and "limit" must both occur.
_MESSAGE_RULES: Tuple[Tuple[ErrorCode, Tuple[str, ...], bool], ...] = (
    (ErrorCode.RATE_LIMIT, ("rate", "limit"), True),
    (ErrorCode.TIMEOUT, ("timeout", "timed out"), False),
    (ErrorCode.AUTH, ("unauthorized", "forbidden", "not authenticated"), False),
    (ErrorCode.NOT_FOUND, ("not found",), False),
    (ErrorCode.UNAVAILABLE, ("unavailable",), False),
    (ErrorCode.TRANSIENT, ("connection reset", "connection refused", "broken pipe"), False),
)


def _valid_status(value: object) -> Optional[int]:
    return value if isinstance(value, int) and 100 <= value < 600 else None


def _extract_status(exc: object) -> Optional[int]:
    """HTTP status from ``exc.status_code``, ``exc.status`` or ``exc.response.status_code``."""
    for candidate in (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        status = _valid_status(candidate)
        if status is not None:
            return status
    return None


def code_for_status(status: int) -> ErrorCode:
    """Unlisted 5xx statuses are ``SERVER_ERROR``; any other unlisted status is ``TRANSPORT``."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    return ErrorCode.SERVER_ERROR if 500 <= status < 600 else ErrorCode.TRANSPORT


def _code_from_message(text: str) -> Optional[ErrorCode]:
    lowered = text.lower()
    for code, needles, need_all in _MESSAGE_RULES:
        hits = (needle in lowered for needle in needles)
        if all(hits) if need_all else any(hits):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Return the :class:`ErrorCode` for ``exc``.

    Checked in order: a ``GatewayError`` keeps its own code, then timeouts,
    then an HTTP status carried by the exception, then httpx transport
    failures (``TRANSIENT``), then message keywords. Anything else is
    ``UNKNOWN``.
    """
    if isinstance(exc, GatewayError):
        return exc.code
    if isinstance(exc, _TIMEOUT_TYPES):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    return _code_from_message(str(exc)) or ErrorCode.UNKNOWN


__all__ = ["classify_exception", "code_for_status"]
