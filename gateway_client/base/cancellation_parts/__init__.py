"""Cancellation primitives (implementation modules)."""

from .cancelled_error import CancelledError
from .cancellation_token import CancelHook, CancellationToken

__all__ = ["CancelHook", "CancellationToken", "CancelledError"]
