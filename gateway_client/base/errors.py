"""Unified gateway error taxonomy public surface.

Re-exports the implementations under ``gateway_client.base.errors_parts`` so
callers have one stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.gateway_error import (
    AuthenticationError,
    GatewayError,
    LookupFailure,
    MalformedFrameError,
    TransportError,
)
from .errors_parts.classification import classify_exception, code_for_status

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
