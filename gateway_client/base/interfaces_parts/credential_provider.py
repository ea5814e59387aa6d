"""Credential provider contract for the stream controller."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of the bearer token attached to gateway calls.

    Consulted once per session, before the HTTP request is issued. Returning
    ``None`` (or an empty string) means "not authenticated"; the controller
    fails the session with ``AuthenticationError`` without touching the
    network. Implementations may block (e.g. a session-store lookup).
    """

    def get_access_token(self) -> Optional[str]:
        ...


__all__ = ["CredentialProvider"]
