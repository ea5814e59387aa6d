"""Protocols the stream controller depends on (injected, never constructed implicitly)."""

from .credential_provider import CredentialProvider
from .stream_opener import StreamOpener, StreamResponse

__all__ = ["CredentialProvider", "StreamOpener", "StreamResponse"]
