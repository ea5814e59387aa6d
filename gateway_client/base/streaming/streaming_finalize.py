"""Terminal logging for stream sessions.

Every session ends with exactly one normalized log event carrying its
metrics: ``stream.session.end`` (finished), ``stream.session.cancelled`` or
``stream.session.error``.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ErrorCode, GatewayError
from ..logging import LogContext, log_event, normalized_log_event
from .session import SessionState, StreamSession
from .streaming_metrics import build_token_usage

_EVENT_BY_STATE = {
    SessionState.FINISHED: "stream.session.end",
    SessionState.CANCELLED: "stream.session.cancelled",
    SessionState.ERRORED: "stream.session.error",
}


def finalize_session(logger: logging.Logger, ctx: Optional[LogContext], session: StreamSession) -> None:
    """Emit the single terminal event for ``session`` (must already be terminal)."""
    error = session.error
    error_code: Optional[str] = None
    if isinstance(error, GatewayError):
        error_code = error.code.value
    elif session.state is SessionState.CANCELLED:
        error_code = ErrorCode.CANCELLED.value

    metrics = session.metrics
    normalized_log_event(
        logger,
        _EVENT_BY_STATE.get(session.state, "stream.session.end"),
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=build_token_usage(session.usage),
        error_code=error_code,
        level=logging.WARNING if session.state is SessionState.ERRORED else logging.INFO,
        state=session.state.value,
        emitted_count=metrics.emitted,
        chunks=metrics.chunks,
        bytes_received=metrics.bytes_received,
        malformed_frames=metrics.malformed_frames,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        status_code=getattr(error, "status_code", None),
        error=str(error)[:260] if error is not None else None,
    )
    if session.state is SessionState.FINISHED and session.usage is None:
        # Valid for providers that never report usage.
        log_event(logger, "stream.usage.absent", ctx, level=logging.DEBUG)


__all__ = ["finalize_session"]
