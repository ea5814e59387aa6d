"""gateway_client package

Streaming chat client for an LLM gateway that fronts several providers.

Purpose:
    Turn the gateway's ``data: ``-framed event stream into ordered text
    deltas, a single usage report and exactly one terminal callback, and
    answer tier/quota questions against the access database.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`GatewayClient`
    - Streaming: :class:`StreamController`, :class:`StreamCallbacks`,
      :class:`StreamHandle`, :class:`CancellationToken`
    - Access: :class:`AccessGate`, :class:`UnknownTierPolicy`, :func:`estimate_cost`
    - Errors: :class:`GatewayError`, :class:`ErrorCode`
"""

from .access import AccessGate, UnknownTierPolicy, estimate_cost
from .base.cancellation import CancellationToken
from .base.errors import (
    AuthenticationError,
    ErrorCode,
    GatewayError,
    MalformedFrameError,
    TransportError,
)
from .base.models import ChatRequest, Message, ModelDescriptor, QuotaStatus, UsageReport
from .base.streaming import StreamCallbacks, StreamController, StreamHandle
from .client import GatewayClient

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "GatewayClient",
    "StreamController",
    "StreamCallbacks",
    "StreamHandle",
    "CancellationToken",
    "AccessGate",
    "UnknownTierPolicy",
    "estimate_cost",
    "GatewayError",
    "ErrorCode",
    "AuthenticationError",
    "TransportError",
    "MalformedFrameError",
    "ChatRequest",
    "Message",
    "ModelDescriptor",
    "QuotaStatus",
    "UsageReport",
]
