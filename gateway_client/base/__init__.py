"""
Gateway client base package.

Exports the provider-agnostic pieces the stream controller is built from:

- Models: immutable request/usage/catalog values
- DTOs: pydantic validation for caller input and wire usage frames
- Interfaces: credential and stream-opener protocols
- Errors, cancellation, timeouts and structured logging
"""

from .cancellation import CancellationToken, CancelledError
from .credentials import EnvCredentialProvider, SessionStoreCredentialProvider, StaticCredentialProvider
from .errors import (
    AuthenticationError,
    ErrorCode,
    GatewayError,
    LookupFailure,
    MalformedFrameError,
    TransportError,
    classify_exception,
)
from .interfaces import CredentialProvider, StreamOpener, StreamResponse
from .models import ChatRequest, Message, ModelDescriptor, QuotaStatus, UsageReport
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "CancellationToken",
    "CancelledError",
    "CredentialProvider",
    "StaticCredentialProvider",
    "EnvCredentialProvider",
    "SessionStoreCredentialProvider",
    "StreamOpener",
    "StreamResponse",
    "ErrorCode",
    "GatewayError",
    "AuthenticationError",
    "TransportError",
    "MalformedFrameError",
    "LookupFailure",
    "classify_exception",
    "ChatRequest",
    "Message",
    "ModelDescriptor",
    "QuotaStatus",
    "UsageReport",
    "TimeoutConfig",
    "get_timeout_config",
]
