"""Server-sent-event frame decoder.

Turns network chunks of arbitrary size into ``RawFrame`` objects, one per
``data: `` line, in arrival order. The frame sequence is independent of how
the bytes were segmented: UTF-8 decoding is incremental (a multi-byte
character split across chunks is completed by the next chunk) and a trailing
partial line stays buffered until its newline arrives.

Lines that do not start with ``data: `` (comments, ``event:``/``id:`` fields,
keep-alive blanks) are dropped. A trailing ``\\r`` is stripped so CRLF
framing decodes identically to LF framing.
"""
from __future__ import annotations

import codecs
from typing import Iterable, Iterator, List

from ...config.defaults import SSE_DATA_PREFIX, SSE_DONE_SENTINEL
from .events import RawFrame


class FrameDecoder:
    """Stateful, single-use decoder owned by exactly one stream session."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """Text received after the last newline (not yet framed)."""
        return self._buffer

    def feed(self, chunk: bytes) -> List[RawFrame]:
        """Append ``chunk`` and return the frames completed by it."""
        if self._closed:
            return []
        self._buffer += self._decoder.decode(chunk)
        if "\n" not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split("\n")
        return [frame for frame in map(_frame_from_line, lines) if frame is not None]

    def flush(self) -> List[RawFrame]:
        """Finish decoding at end of stream.

        Bytes of an incomplete trailing character become U+FFFD, and a final
        ``data: `` line without a terminating newline is still framed (the
        normalizer rejects it if its JSON was truncated). Later ``feed``
        calls are ignored.
        """
        if self._closed:
            return []
        self._closed = True
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        frames: List[RawFrame] = []
        for line in tail.split("\n"):
            frame = _frame_from_line(line)
            if frame is not None:
                frames.append(frame)
        return frames


def _frame_from_line(line: str):
    if line.endswith("\r"):
        line = line[:-1]
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    payload = line[len(SSE_DATA_PREFIX):]
    return RawFrame(payload=payload, is_done=payload == SSE_DONE_SENTINEL)


def iter_frames(chunks: Iterable[bytes]) -> Iterator[RawFrame]:
    """Lazily decode an iterable of byte chunks into frames, flushing at the end."""
    decoder = FrameDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()


__all__ = ["FrameDecoder", "iter_frames"]
