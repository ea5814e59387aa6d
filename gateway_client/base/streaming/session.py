"""Stream session state.

A ``StreamSession`` belongs to exactly one controller invocation and is never
shared. It owns the frame decoder (and therefore the partial-line buffer),
the last usage report, the terminal guard, and the lifecycle state.

Lifecycle::

    IDLE -> AUTHENTICATING -> OPENING -> STREAMING -> FINISHED
                   |             |           |     -> ERRORED
                   +-------------+-----------+-----> ERRORED / CANCELLED

``FINISHED``, ``ERRORED`` and ``CANCELLED`` are absorbing.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..models import UsageReport
from .frame_decoder import FrameDecoder
from .streaming_metrics import StreamMetrics


class SessionState(str, Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    OPENING = "opening"
    STREAMING = "streaming"
    FINISHED = "finished"
    ERRORED = "errored"
    CANCELLED = "cancelled"


TERMINAL_STATES: FrozenSet[SessionState] = frozenset(
    {SessionState.FINISHED, SessionState.ERRORED, SessionState.CANCELLED}
)

_ALLOWED: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.AUTHENTICATING}),
    SessionState.AUTHENTICATING: frozenset(
        {SessionState.OPENING, SessionState.ERRORED, SessionState.CANCELLED}
    ),
    SessionState.OPENING: frozenset(
        {SessionState.STREAMING, SessionState.ERRORED, SessionState.CANCELLED}
    ),
    SessionState.STREAMING: TERMINAL_STATES,
}


class IllegalTransition(RuntimeError):
    """Raised when code tries to move a session along an edge not in the lifecycle."""


@dataclass
class StreamSession:
    """Mutable, single-owner state for one request."""

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: SessionState = SessionState.IDLE
    decoder: FrameDecoder = field(default_factory=FrameDecoder)
    usage: Optional[UsageReport] = None
    terminal_signaled: bool = False
    error: Optional[Exception] = None
    metrics: StreamMetrics = field(default_factory=StreamMetrics)

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, target: SessionState) -> None:
        """Move to ``target`` or raise :class:`IllegalTransition`."""
        if target not in _ALLOWED.get(self.state, frozenset()):
            raise IllegalTransition(f"{self.state.value} -> {target.value}")
        self.state = target

    def claim_terminal(self, target: SessionState) -> bool:
        """Enter terminal ``target`` exactly once.

        Returns ``True`` for the first caller, ``False`` when the session has
        already ended (the caller must then stay silent). Not synchronized:
        only the thread running the session calls it. A cancel from another
        thread just closes the transport and the session thread claims
        ``CANCELLED`` itself.
        """
        if self.terminal_signaled or self.done:
            return False
        self.advance(target)
        self.terminal_signaled = True
        return True


__all__ = [
    "SessionState",
    "TERMINAL_STATES",
    "IllegalTransition",
    "StreamSession",
]
