"""Error taxonomy and exception classification."""

from __future__ import annotations

import httpx
import pytest

from gateway_client.base.errors import (
    AuthenticationError,
    ErrorCode,
    GatewayError,
    LookupFailure,
    MalformedFrameError,
    TransportError,
    classify_exception,
    code_for_status,
)


class _StatusExc(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


def test_subclasses_carry_default_codes():
    assert AuthenticationError("no token").code is ErrorCode.AUTH  # nosec B101 - pytest assert in tests
    assert TransportError("x").code is ErrorCode.TRANSPORT  # nosec B101 - pytest assert in tests
    assert MalformedFrameError("x").code is ErrorCode.MALFORMED_FRAME  # nosec B101 - pytest assert in tests
    assert LookupFailure("x").code is ErrorCode.LOOKUP  # nosec B101 - pytest assert in tests
    assert str(TransportError("boom", status_code=500)) == "boom"  # nosec B101 - pytest assert in tests


def test_gateway_error_passthrough():
    err = TransportError("x", code=ErrorCode.RATE_LIMIT)
    assert classify_exception(err) is ErrorCode.RATE_LIMIT  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "exc, code",
    [
        (TimeoutError(), ErrorCode.TIMEOUT),
        (httpx.ReadTimeout("idle"), ErrorCode.TIMEOUT),
        (httpx.ConnectError("refused"), ErrorCode.TRANSIENT),
        (_StatusExc(429), ErrorCode.RATE_LIMIT),
        (_StatusExc(401), ErrorCode.AUTH),
        (_StatusExc(599), ErrorCode.SERVER_ERROR),
        (RuntimeError("Rate limit reached"), ErrorCode.RATE_LIMIT),
        (RuntimeError("service unavailable"), ErrorCode.UNAVAILABLE),
        (RuntimeError("connection reset by peer"), ErrorCode.TRANSIENT),
        (RuntimeError("something odd"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_exception(exc, code):
    assert classify_exception(exc) is code  # nosec B101 - pytest assert in tests


def test_http_status_error_uses_response_status():
    request = httpx.Request("POST", "https://gateway.test/chat")
    response = httpx.Response(503, request=request)
    exc = httpx.HTTPStatusError("bad", request=request, response=response)
    assert classify_exception(exc) is ErrorCode.UNAVAILABLE  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "status, code",
    [(400, ErrorCode.VALIDATION), (404, ErrorCode.NOT_FOUND), (502, ErrorCode.TRANSIENT), (402, ErrorCode.TRANSPORT)],
)
def test_code_for_status(status, code):
    assert code_for_status(status) is code  # nosec B101 - pytest assert in tests


def test_gateway_error_is_an_exception():
    with pytest.raises(GatewayError):
        raise AuthenticationError("Not authenticated")
