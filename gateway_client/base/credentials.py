"""Credential provider implementations.

The controller only sees the :class:`CredentialProvider` protocol; these
classes cover the common sources. A token is read once per session and is a
snapshot: it is not refreshed while a stream is in flight.
"""
from __future__ import annotations

from typing import Callable, Optional

from ..config.env import resolve_access_token
from .interfaces_parts.credential_provider import CredentialProvider


class StaticCredentialProvider:
    """Always returns the token it was built with (``None`` = anonymous)."""

    def __init__(self, token: Optional[str]) -> None:
        self._token = token

    def get_access_token(self) -> Optional[str]:
        return self._token


class EnvCredentialProvider:
    """Reads ``GATEWAY_ACCESS_TOKEN`` on every call; placeholders count as absent."""

    def get_access_token(self) -> Optional[str]:
        return resolve_access_token()


class SessionStoreCredentialProvider:
    """Adapts an external session lookup (``() -> token | None``).

    The lookup is whatever the hosting application uses to find the current
    user's session; exceptions it raises are reported by the controller as
    authentication failures.
    """

    def __init__(self, lookup: Callable[[], Optional[str]]) -> None:
        self._lookup = lookup

    def get_access_token(self) -> Optional[str]:
        return self._lookup()


__all__ = [
    "CredentialProvider",
    "StaticCredentialProvider",
    "EnvCredentialProvider",
    "SessionStoreCredentialProvider",
]
