"""Stream session controller.

Owns the lifecycle of one streaming chat call: authenticate, open the HTTP
stream, drive decoder -> normalizer, and translate the result into caller
callbacks.

Callback contract, per session:
    ``on_update(text)``   zero or more times, in byte-arrival order
    ``on_finish(usage)``  exactly once on ``[DONE]`` or clean end of stream,
                          with the last usage report seen (or ``None``)
    ``on_error(error)``   exactly once on authentication or transport failure
Exactly one of ``on_finish``/``on_error`` fires, and nothing fires after it.
A cancelled session fires neither: cancellation is the caller's own action.

Exceptions raised by callbacks are logged and swallowed; they never change
the session outcome and never escape ``open``.

Known limitation: the bearer token is read once when the session opens and
is not refreshed mid-stream. A stream outliving its token fails however the
gateway reports it (usually an upstream error), not via re-authentication.
"""
from __future__ import annotations

import json
import logging
import threading
import time
from contextlib import suppress
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from ...config.defaults import GATEWAY_GENERIC_ERROR_MESSAGE
from ..cancellation import CancellationToken, CancelledError
from ..errors import (
    AuthenticationError,
    ErrorCode,
    GatewayError,
    TransportError,
    classify_exception,
    code_for_status,
)
from ..interfaces import CredentialProvider, StreamOpener, StreamResponse
from ..logging import LogContext, get_logger, log_event
from ..models import ChatRequest, UsageReport
from .events import ContentDelta, RawFrame, Terminal
from .normalizer import TEXT_MATCHERS, Normalizer, TextMatcher
from .session import SessionState, StreamSession
from .streaming_finalize import finalize_session

_RETRYABLE = frozenset({ErrorCode.RATE_LIMIT, ErrorCode.TRANSIENT, ErrorCode.UNAVAILABLE, ErrorCode.TIMEOUT})


@dataclass
class StreamCallbacks:
    """Caller hooks; any of them may be omitted."""

    on_update: Optional[Callable[[str], None]] = None
    on_finish: Optional[Callable[[Optional[UsageReport]], None]] = None
    on_error: Optional[Callable[[GatewayError], None]] = None


class StreamController:
    """Drives stream sessions against one gateway endpoint.

    The controller holds no per-session state; concurrent sessions on the
    same instance are independent.

    Args:
        credentials: Source of the bearer token, consulted once per session.
        opener: Issues the streaming HTTP request.
        endpoint: Absolute URL of the gateway chat function.
        matchers: Ordered text matchers handed to the normalizer.
        logger: Optional logger (defaults to this module's child logger).
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        opener: StreamOpener,
        *,
        endpoint: str,
        matchers: Tuple[TextMatcher, ...] = TEXT_MATCHERS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._credentials = credentials
        self._opener = opener
        self._endpoint = endpoint
        self._matchers = matchers
        self._logger = logger or get_logger(__name__)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def open(
        self,
        request: ChatRequest,
        callbacks: StreamCallbacks,
        token: Optional[CancellationToken] = None,
    ) -> StreamSession:
        """Run one session to completion on the calling thread.

        Returns the finished session for inspection; outcomes are reported
        only through ``callbacks``.
        """
        session = StreamSession()
        self._drive(request, callbacks, token, session)
        return session

    def open_in_background(
        self,
        request: ChatRequest,
        callbacks: StreamCallbacks,
        token: Optional[CancellationToken] = None,
    ) -> "StreamHandle":
        """Run one session on a daemon thread and return a handle to it.

        Callbacks are invoked on that worker thread.
        """
        token = token or CancellationToken()
        session = StreamSession()
        thread = threading.Thread(
            target=self._drive,
            args=(request, callbacks, token, session),
            name=f"gateway-stream-{session.session_id[:8]}",
            daemon=True,
        )
        handle = StreamHandle(session=session, token=token, thread=thread)
        thread.start()
        return handle

    def _drive(
        self,
        request: ChatRequest,
        callbacks: StreamCallbacks,
        token: Optional[CancellationToken],
        session: StreamSession,
    ) -> None:
        _SessionRun(self, request, callbacks, token, session).run()


class StreamHandle:
    """Handle to a background session: cancel it or wait for it."""

    def __init__(self, *, session: StreamSession, token: CancellationToken, thread: threading.Thread) -> None:
        self._session = session
        self._token = token
        self._thread = thread

    @property
    def session(self) -> StreamSession:
        return self._session

    @property
    def done(self) -> bool:
        return not self._thread.is_alive()

    def cancel(self, reason: str | None = "cancelled by caller") -> None:
        """Close the transport and suppress further callbacks. Idempotent."""
        self._token.cancel(reason)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the session thread; return ``True`` once it has ended."""
        self._thread.join(timeout)
        return not self._thread.is_alive()


class _SessionRun:
    """One execution of the session loop. Lives only for the duration of ``run``."""

    def __init__(
        self,
        controller: StreamController,
        request: ChatRequest,
        callbacks: StreamCallbacks,
        token: Optional[CancellationToken],
        session: StreamSession,
    ) -> None:
        self._controller = controller
        self._logger = controller._logger
        self._request = request
        self._callbacks = callbacks
        self._token = token or CancellationToken()
        self._session = session
        self._ctx = LogContext(
            model=request.model,
            session_id=session.session_id,
            conversation_id=request.conversation_id,
        )
        self._normalizer = Normalizer(matchers=controller._matchers, logger=self._logger, ctx=self._ctx)
        self._response: Optional[StreamResponse] = None
        self._response_closed = False
        self._close_lock = threading.Lock()
        self._t0 = time.perf_counter()

    # lifecycle -------------------------------------------------------------
    def run(self) -> None:
        try:
            self._run()
        except CancelledError:
            self._cancel()
        except Exception as exc:  # noqa: BLE001 - reported as an internal error
            if self._session.done:
                self._logger.exception("stream.session.internal_error_after_terminal")
            else:
                self._fail(GatewayError(message=f"internal error: {exc}", code=ErrorCode.INTERNAL, model=self._request.model, raw=exc))
        finally:
            self._close_response()

    def _run(self) -> None:
        session = self._session
        session.advance(SessionState.AUTHENTICATING)
        log_event(self._logger, "stream.session.start", self._ctx, endpoint=self._controller.endpoint)
        self._token.raise_if_cancelled()

        access_token = self._authenticate()
        if access_token is None:
            return

        session.advance(SessionState.OPENING)
        self._token.raise_if_cancelled()
        response = self._open(access_token)
        if response is None:
            return

        unregister = self._token.on_cancel(lambda _reason: self._close_response())
        try:
            self._token.raise_if_cancelled()
            if not 200 <= response.status_code < 300:
                self._fail(self._status_error(response))
                return
            session.advance(SessionState.STREAMING)
            self._pump(response)
        finally:
            unregister()

    def _authenticate(self) -> Optional[str]:
        try:
            access_token = self._controller._credentials.get_access_token()
        except Exception as exc:  # noqa: BLE001 - any lookup failure means unauthenticated
            self._fail(AuthenticationError(message=f"credential lookup failed: {exc}", model=self._request.model, raw=exc))
            return None
        if not access_token or not access_token.strip():
            self._fail(AuthenticationError(message="Not authenticated", model=self._request.model))
            return None
        return access_token.strip()

    def _open(self, access_token: str) -> Optional[StreamResponse]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            "Authorization": f"Bearer {access_token}",
        }
        try:
            response = self._controller._opener.open(
                self._controller.endpoint,
                headers=headers,
                json_body=self._request.to_payload(),
            )
        except Exception as exc:  # noqa: BLE001 - classified below
            self._token.raise_if_cancelled()
            self._fail(self._transport_error(exc))
            return None
        self._response = response
        return response

    def _pump(self, response: StreamResponse) -> None:
        """Read chunks until a terminal event, EOF or failure.

        Cancellation surfaces as ``CancelledError``; a read that fails because
        the transport was closed by a cancel is reported the same way.
        """
        session = self._session
        try:
            chunks = iter(response.iter_bytes())
        except Exception as exc:  # noqa: BLE001
            self._fail(self._transport_error(exc))
            return
        while True:
            try:
                chunk = next(chunks)
            except StopIteration:
                break
            except Exception as exc:  # noqa: BLE001 - network failure mid-read
                self._token.raise_if_cancelled()
                self._fail(self._transport_error(exc))
                return
            self._token.raise_if_cancelled()
            session.metrics.chunks += 1
            session.metrics.bytes_received += len(chunk)
            if self._dispatch(session.decoder.feed(chunk)):
                return
        self._token.raise_if_cancelled()
        if self._dispatch(session.decoder.flush()):
            return
        # End of stream without [DONE]: implicit normal completion.
        self._finish()

    def _dispatch(self, frames: Iterable[RawFrame]) -> bool:
        """Deliver decoded frames; return ``True`` once a terminal frame ended the session."""
        session = self._session
        for frame in frames:
            self._token.raise_if_cancelled()
            event = self._normalizer.normalize(frame)
            if event is None:
                continue
            if isinstance(event, ContentDelta):
                self._deliver_update(event.text)
            elif isinstance(event, UsageReport):
                session.usage = event
                session.metrics.usage = event
            elif isinstance(event, Terminal):
                self._finish()
                return True
        return False

    # terminal transitions ----------------------------------------------------
    def _finish(self) -> None:
        if not self._session.claim_terminal(SessionState.FINISHED):
            return
        self._close_response()
        self._record_end()
        self._invoke("on_finish", self._callbacks.on_finish, self._session.usage)

    def _fail(self, error: GatewayError) -> None:
        if not self._session.claim_terminal(SessionState.ERRORED):
            return
        self._session.error = error
        self._close_response()
        self._record_end()
        self._invoke("on_error", self._callbacks.on_error, error)

    def _cancel(self) -> None:
        if not self._session.claim_terminal(SessionState.CANCELLED):
            return
        self._close_response()
        self._record_end()

    def _record_end(self) -> None:
        metrics = self._session.metrics
        metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
        metrics.malformed_frames = self._normalizer.malformed_count
        finalize_session(self._logger, self._ctx, self._session)

    # helpers -------------------------------------------------------------------
    def _deliver_update(self, text: str) -> None:
        metrics = self._session.metrics
        if metrics.emitted == 0:
            metrics.time_to_first_token_ms = (time.perf_counter() - self._t0) * 1000.0
        metrics.emitted += 1
        self._invoke("on_update", self._callbacks.on_update, text)

    def _invoke(self, name: str, fn: Optional[Callable], *args) -> None:
        if fn is None:
            return
        try:
            fn(*args)
        except Exception as exc:  # noqa: BLE001 - callback errors are logged only
            log_event(
                self._logger,
                "stream.callback.error",
                self._ctx,
                level=logging.ERROR,
                callback=name,
                error=f"{exc.__class__.__name__}: {exc}"[:260],
            )

    def _close_response(self) -> None:
        with self._close_lock:
            if self._response is None or self._response_closed:
                return
            self._response_closed = True
            response = self._response
        with suppress(Exception):  # nosec B110 - closing a dead connection may raise
            response.close()

    def _transport_error(self, exc: Exception) -> TransportError:
        code = classify_exception(exc)
        if code is ErrorCode.UNKNOWN:
            code = ErrorCode.TRANSPORT
        return TransportError(
            message=str(exc) or exc.__class__.__name__,
            code=code,
            model=self._request.model,
            retryable=code in _RETRYABLE,
            raw=exc,
        )

    def _status_error(self, response: StreamResponse) -> TransportError:
        status = response.status_code
        message = GATEWAY_GENERIC_ERROR_MESSAGE
        with suppress(Exception):  # body may be missing, unreadable, or not JSON
            body = response.read()
            parsed = json.loads(body)
            if isinstance(parsed, dict) and isinstance(parsed.get("error"), str) and parsed["error"]:
                message = parsed["error"]
        code = code_for_status(status)
        return TransportError(
            message=message,
            code=code,
            model=self._request.model,
            status_code=status,
            retryable=code in _RETRYABLE,
        )


__all__ = ["StreamCallbacks", "StreamController", "StreamHandle"]
