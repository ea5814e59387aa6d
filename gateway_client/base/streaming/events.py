"""Streaming event types.

``RawFrame`` is what the decoder produces; ``NormalizedEvent`` is what the
normalizer hands to the controller. Both are transient: produced and
consumed within one loop iteration, never stored.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..models import UsageReport


@dataclass(frozen=True)
class RawFrame:
    """One ``data: `` line from the event stream.

    ``payload`` is the text after the prefix. ``is_done`` marks the
    ``[DONE]`` sentinel, which is never handed to the JSON parser.
    """

    payload: str
    is_done: bool = False


@dataclass(frozen=True)
class ContentDelta:
    """A chunk of assistant output, appended in arrival order."""

    text: str


class TerminalKind(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Terminal:
    """Ends the session; nothing is produced or consumed afterwards."""

    kind: TerminalKind
    reason: Optional[str] = None


NormalizedEvent = Union[ContentDelta, UsageReport, Terminal]

COMPLETED = Terminal(TerminalKind.COMPLETED)


__all__ = [
    "RawFrame",
    "ContentDelta",
    "UsageReport",
    "Terminal",
    "TerminalKind",
    "NormalizedEvent",
    "COMPLETED",
]
