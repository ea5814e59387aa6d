"""Errors parts package public surface.

Prefer importing from `gateway_client.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .gateway_error import (
    AuthenticationError,
    GatewayError,
    LookupFailure,
    MalformedFrameError,
    TransportError,
)
from .classification import classify_exception, code_for_status

__all__ = [
    "ErrorCode",
    "GatewayError",
    "AuthenticationError",
    "TransportError",
    "MalformedFrameError",
    "LookupFailure",
    "classify_exception",
    "code_for_status",
]
