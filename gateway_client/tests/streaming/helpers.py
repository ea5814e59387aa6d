"""Fakes shared by the streaming tests.

``FakeResponse``/``FakeOpener`` stand in for httpx so the controller can be
driven with exact byte segmentations, HTTP errors and mid-stream failures.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from gateway_client.base.errors import GatewayError
from gateway_client.base.models import ChatRequest, Message, UsageReport
from gateway_client.base.streaming import StreamCallbacks


def frame(payload: Any) -> bytes:
    """One ``data: `` line; dicts are JSON-encoded, strings sent verbatim."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return f"data: {text}\n".encode("utf-8")


def sse(*payloads: Any, done: bool = True) -> bytes:
    body = b"".join(frame(p) + b"\n" for p in payloads)
    return body + (b"data: [DONE]\n\n" if done else b"")


def openai_delta(text: str) -> Dict[str, Any]:
    return {"choices": [{"delta": {"content": text}}]}


def anthropic_delta(text: str) -> Dict[str, Any]:
    return {"delta": {"text": text}}


def google_candidate(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def usage_frame(prompt: int, completion: int, total: Optional[int] = None) -> Dict[str, Any]:
    usage: Dict[str, Any] = {"promptTokens": prompt, "completionTokens": completion}
    if total is not None:
        usage["totalTokens"] = total
    return {"type": "usage", "usage": usage}


def chunked(data: bytes, size: int) -> List[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def make_request(model: str = "gpt-4o-mini", text: str = "hi") -> ChatRequest:
    return ChatRequest.of(model, [Message(role="user", content=text)])


class FakeResponse:
    """Minimal ``StreamResponse``.

    ``error`` is raised by ``iter_bytes`` once ``error_after`` chunks have
    been yielded. After ``close`` no more chunks are produced.
    """

    def __init__(
        self,
        chunks: Sequence[bytes] = (),
        *,
        status_code: int = 200,
        body: bytes = b"",
        error: Optional[BaseException] = None,
        error_after: int = 0,
    ) -> None:
        self.status_code = status_code
        self._chunks = list(chunks)
        self._body = body
        self._error = error
        self._error_after = error_after
        self.closed = False
        self.close_calls = 0
        self.read_calls = 0

    def iter_bytes(self) -> Iterator[bytes]:
        for i, chunk in enumerate(self._chunks):
            if self._error is not None and i == self._error_after:
                raise self._error
            if self.closed:
                return
            yield chunk
        if self._error is not None and self._error_after >= len(self._chunks):
            raise self._error

    def read(self) -> bytes:
        self.read_calls += 1
        return self._body

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class BlockingResponse(FakeResponse):
    """Yields ``first`` then blocks until closed, like a stalled socket."""

    def __init__(self, first: bytes) -> None:
        super().__init__([first])
        self.first_sent = threading.Event()
        self._released = threading.Event()

    def iter_bytes(self) -> Iterator[bytes]:
        yield self._chunks[0]
        self.first_sent.set()
        self._released.wait(5.0)
        raise ConnectionError("connection closed")

    def close(self) -> None:
        super().close()
        self._released.set()


class FakeOpener:
    """Records requests and returns a canned response (or raises)."""

    def __init__(self, response: Optional[FakeResponse] = None, *, error: Optional[BaseException] = None) -> None:
        self.response = response if response is not None else FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def open(self, url: str, *, headers: Mapping[str, str], json_body: Dict[str, Any]) -> FakeResponse:
        self.calls.append({"url": url, "headers": dict(headers), "json_body": json_body})
        if self.error is not None:
            raise self.error
        return self.response


class RecordingCallbacks:
    """Collects callback invocations in order."""

    def __init__(self) -> None:
        self.updates: List[str] = []
        self.finishes: List[Optional[UsageReport]] = []
        self.errors: List[GatewayError] = []
        self.order: List[str] = []

    def on_update(self, text: str) -> None:
        self.updates.append(text)
        self.order.append("update")

    def on_finish(self, usage: Optional[UsageReport]) -> None:
        self.finishes.append(usage)
        self.order.append("finish")

    def on_error(self, err: GatewayError) -> None:
        self.errors.append(err)
        self.order.append("error")

    @property
    def terminal_count(self) -> int:
        return len(self.finishes) + len(self.errors)

    def callbacks(self) -> StreamCallbacks:
        return StreamCallbacks(on_update=self.on_update, on_finish=self.on_finish, on_error=self.on_error)
