"""Cancellation for stream sessions.

Cancelling a token closes the session's transport and ends it as
``CANCELLED``; no callback fires afterwards.
"""

from .cancellation_parts.cancellation_token import CancelHook, CancellationToken
from .cancellation_parts.cancelled_error import CancelledError

__all__ = ["CancelHook", "CancellationToken", "CancelledError"]
