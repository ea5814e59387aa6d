"""Transport contracts: how the controller opens and reads an HTTP stream."""
from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Protocol, runtime_checkable


@runtime_checkable
class StreamResponse(Protocol):
    """Minimal view of a streaming HTTP response (``httpx.Response`` fits)."""

    status_code: int

    def iter_bytes(self) -> Iterator[bytes]:
        """Yield body chunks of arbitrary size as they arrive."""
        ...

    def read(self) -> bytes:
        """Read the whole remaining body (used for error responses)."""
        ...

    def close(self) -> None:
        """Release the connection; safe to call more than once."""
        ...


@runtime_checkable
class StreamOpener(Protocol):
    """Issues the POST and returns the response before the body is consumed."""

    def open(self, url: str, *, headers: Mapping[str, str], json_body: Dict[str, Any]) -> StreamResponse:
        ...


__all__ = ["StreamResponse", "StreamOpener"]
