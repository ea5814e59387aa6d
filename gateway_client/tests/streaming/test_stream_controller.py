"""Stream controller contract: callback ordering, exactly-one terminal,
error surfacing and cancellation."""

from __future__ import annotations

import httpx
import pytest

from gateway_client.base.cancellation import CancellationToken
from gateway_client.base.credentials import SessionStoreCredentialProvider, StaticCredentialProvider
from gateway_client.base.errors import AuthenticationError, ErrorCode, TransportError
from gateway_client.base.models import ChatRequest, Message, UsageReport
from gateway_client.base.streaming import SessionState, StreamCallbacks, StreamController
from gateway_client.tests.streaming.helpers import (
    BlockingResponse,
    FakeOpener,
    FakeResponse,
    RecordingCallbacks,
    chunked,
    frame,
    make_request,
    openai_delta,
    sse,
    usage_frame,
)

ENDPOINT = "https://gateway.test/functions/v1/v1-chat"


def _controller(opener, token="tok-123"):
    creds = token if not isinstance(token, (str, type(None))) else StaticCredentialProvider(token)
    return StreamController(creds, opener, endpoint=ENDPOINT)


def _run(chunks, **response_kwargs):
    opener = FakeOpener(FakeResponse(chunks, **response_kwargs))
    rec = RecordingCallbacks()
    session = _controller(opener).open(make_request(), rec.callbacks())
    return rec, session, opener


def test_hel_lo_done_scenario():
    body = (
        frame(openai_delta("Hel"))
        + frame(openai_delta("lo"))
        + b"data: [DONE]\n"
    )
    rec, session, _ = _run([body])
    assert rec.updates == ["Hel", "lo"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [None]  # nosec B101 - pytest assert in tests
    assert rec.errors == []  # nosec B101 - pytest assert in tests
    assert rec.order == ["update", "update", "finish"]  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.FINISHED  # nosec B101 - pytest assert in tests


def test_eof_without_done_is_implicit_completion():
    body = frame(openai_delta("Hel")) + frame(openai_delta("lo"))
    rec, session, opener = _run([body])
    assert rec.updates == ["Hel", "lo"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [None]  # nosec B101 - pytest assert in tests
    assert rec.errors == []  # nosec B101 - pytest assert in tests
    assert opener.response.closed  # nosec B101 - pytest assert in tests


def test_malformed_frame_between_valid_frames_is_skipped():
    body = frame(openai_delta("a")) + b"data: not-json\n" + frame(openai_delta("b")) + b"data: [DONE]\n"
    rec, session, _ = _run(chunked(body, 4))
    assert rec.updates == ["a", "b"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [None]  # nosec B101 - pytest assert in tests
    assert rec.errors == []  # nosec B101 - pytest assert in tests
    assert session.metrics.malformed_frames == 1  # nosec B101 - pytest assert in tests


def test_last_usage_report_wins():
    body = sse(usage_frame(1, 1, 2), openai_delta("x"), usage_frame(5, 6, 11))
    rec, session, _ = _run([body])
    assert rec.finishes == [UsageReport(prompt_tokens=5, completion_tokens=6, total_tokens=11)]  # nosec B101
    assert session.usage == rec.finishes[0]  # nosec B101 - pytest assert in tests


def test_usage_after_done_is_ignored():
    body = sse(openai_delta("x"), usage_frame(1, 1, 2)) + frame(usage_frame(9, 9, 18))
    rec, _, _ = _run([body])
    assert rec.finishes == [UsageReport(1, 1, 2)]  # nosec B101 - pytest assert in tests


def test_frames_after_terminal_are_ignored():
    body = sse(openai_delta("a")) + frame(openai_delta("late")) + b"data: [DONE]\n"
    rec, _, opener = _run([body, frame(openai_delta("later"))])
    assert rec.updates == ["a"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [None]  # nosec B101 - pytest assert in tests
    assert opener.response.closed  # nosec B101 - pytest assert in tests


def test_request_headers_and_body():
    opener = FakeOpener(FakeResponse([sse()]))
    req = ChatRequest.of(
        "claude-sonnet",
        [Message("system", "be brief"), Message("user", "hi")],
        temperature=0.2,
        max_tokens=64,
        conversation_id="conv-1",
    )
    _controller(opener).open(req, RecordingCallbacks().callbacks())
    (call,) = opener.calls
    assert call["url"] == ENDPOINT  # nosec B101 - pytest assert in tests
    assert call["headers"]["Authorization"] == "Bearer tok-123"  # nosec B101 - pytest assert in tests
    assert call["headers"]["Content-Type"] == "application/json"  # nosec B101 - pytest assert in tests
    assert call["json_body"] == {  # nosec B101 - pytest assert in tests
        "model": "claude-sonnet",
        "messages": [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}],
        "conversationId": "conv-1",
        "temperature": 0.2,
        "max_tokens": 64,
        "stream": True,
    }


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_credential_fails_before_any_http_call(token):
    opener = FakeOpener()
    rec = RecordingCallbacks()
    session = _controller(opener, token=token).open(make_request(), rec.callbacks())
    assert opener.calls == []  # nosec B101 - pytest assert in tests
    assert len(rec.errors) == 1 and isinstance(rec.errors[0], AuthenticationError)  # nosec B101
    assert rec.errors[0].code is ErrorCode.AUTH  # nosec B101 - pytest assert in tests
    assert rec.finishes == [] and rec.updates == []  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.ERRORED  # nosec B101 - pytest assert in tests


def test_credential_lookup_exception_is_authentication_error():
    def lookup():
        raise RuntimeError("session store offline")

    opener = FakeOpener()
    rec = RecordingCallbacks()
    _controller(opener, token=SessionStoreCredentialProvider(lookup)).open(make_request(), rec.callbacks())
    assert opener.calls == []  # nosec B101 - pytest assert in tests
    assert isinstance(rec.errors[0], AuthenticationError)  # nosec B101 - pytest assert in tests
    assert "session store offline" in rec.errors[0].message  # nosec B101 - pytest assert in tests


def test_http_error_body_message_is_surfaced_verbatim():
    rec, session, opener = _run([], status_code=402, body=b'{"error": "Insufficient credits"}')
    (err,) = rec.errors
    assert isinstance(err, TransportError)  # nosec B101 - pytest assert in tests
    assert err.message == "Insufficient credits"  # nosec B101 - pytest assert in tests
    assert err.status_code == 402  # nosec B101 - pytest assert in tests
    assert rec.finishes == [] and rec.updates == []  # nosec B101 - pytest assert in tests
    assert opener.response.closed  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.ERRORED  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "status, body, code",
    [
        (500, b"<html>oops</html>", ErrorCode.SERVER_ERROR),
        (503, b"", ErrorCode.UNAVAILABLE),
        (429, b'{"message": "slow down"}', ErrorCode.RATE_LIMIT),
        (401, b'{"error": 42}', ErrorCode.AUTH),
    ],
)
def test_http_error_without_error_string_uses_generic_message(status, body, code):
    rec, _, _ = _run([], status_code=status, body=body)
    (err,) = rec.errors
    assert err.message == "API request failed"  # nosec B101 - pytest assert in tests
    assert err.code is code  # nosec B101 - pytest assert in tests


def test_rate_limit_status_is_retryable():
    rec, _, _ = _run([], status_code=429, body=b'{"error": "Rate limit exceeded"}')
    assert rec.errors[0].retryable is True  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "exc, code",
    [
        (httpx.ConnectError("refused"), ErrorCode.TRANSIENT),
        (httpx.ConnectTimeout("slow"), ErrorCode.TIMEOUT),
        (OSError("socket is gone"), ErrorCode.TRANSPORT),
    ],
)
def test_opener_failure_is_transport_error(exc, code):
    opener = FakeOpener(error=exc)
    rec = RecordingCallbacks()
    _controller(opener).open(make_request(), rec.callbacks())
    (err,) = rec.errors
    assert isinstance(err, TransportError) and err.code is code  # nosec B101 - pytest assert in tests
    assert err.raw is exc  # nosec B101 - pytest assert in tests


def test_network_error_mid_stream_keeps_delivered_deltas():
    chunks = [frame(openai_delta("partial")), frame(openai_delta("never"))]
    rec, session, opener = _run(chunks, error=httpx.ReadError("reset by peer"), error_after=1)
    assert rec.updates == ["partial"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == []  # nosec B101 - pytest assert in tests
    (err,) = rec.errors
    assert err.code is ErrorCode.TRANSIENT  # nosec B101 - pytest assert in tests
    assert opener.response.closed  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.ERRORED  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"chunks": [sse(openai_delta("a"))]},
        {"chunks": [frame(openai_delta("a"))]},
        {"chunks": [], "status_code": 500},
        {"chunks": [frame(openai_delta("a"))], "error": httpx.ReadTimeout("idle"), "error_after": 1},
        {"chunks": [b"data: not-json\n"]},
        {"chunks": []},
    ],
    ids=["sentinel", "silent-eof", "http-error", "network-error", "only-malformed", "empty-body"],
)
def test_exactly_one_terminal_callback(response_kwargs):
    chunks = response_kwargs.pop("chunks")
    rec, session, _ = _run(chunks, **response_kwargs)
    assert rec.terminal_count == 1  # nosec B101 - pytest assert in tests
    assert rec.order[-1] in ("finish", "error")  # nosec B101 - pytest assert in tests
    assert session.done  # nosec B101 - pytest assert in tests


def test_callback_exceptions_are_logged_not_raised(log_capture):
    rec = RecordingCallbacks()

    def bad_update(text):
        rec.on_update(text)
        raise ValueError("render failed")

    def bad_finish(usage):
        rec.on_finish(usage)
        raise RuntimeError("finish failed")

    callbacks = rec.callbacks()
    callbacks.on_update = bad_update
    callbacks.on_finish = bad_finish
    opener = FakeOpener(FakeResponse([sse(openai_delta("a"), openai_delta("b"))]))
    _controller(opener).open(make_request(), callbacks)

    assert rec.updates == ["a", "b"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [None] and rec.errors == []  # nosec B101 - pytest assert in tests
    names = [e["callback"] for e in log_capture.events("stream.callback.error")]
    assert names == ["on_update", "on_update", "on_finish"]  # nosec B101 - pytest assert in tests


def test_missing_callbacks_are_allowed():
    opener = FakeOpener(FakeResponse([sse(openai_delta("a"))]))
    session = _controller(opener).open(make_request(), StreamCallbacks())
    assert session.state is SessionState.FINISHED  # nosec B101 - pytest assert in tests


def test_pre_cancelled_token_makes_no_request():
    token = CancellationToken()
    token.cancel("user left")
    opener = FakeOpener()
    rec = RecordingCallbacks()
    session = _controller(opener).open(make_request(), rec.callbacks(), token)
    assert opener.calls == []  # nosec B101 - pytest assert in tests
    assert rec.order == []  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.CANCELLED  # nosec B101 - pytest assert in tests


def test_cancel_from_callback_suppresses_everything_after():
    token = CancellationToken()
    rec = RecordingCallbacks()
    callbacks = rec.callbacks()

    def update_then_cancel(text):
        rec.on_update(text)
        token.cancel("enough")

    callbacks.on_update = update_then_cancel
    response = FakeResponse([sse(openai_delta("a"), openai_delta("b")), sse(openai_delta("c"))])
    session = _controller(FakeOpener(response)).open(make_request(), callbacks, token)
    assert rec.updates == ["a"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [] and rec.errors == []  # nosec B101 - pytest assert in tests
    assert response.closed  # nosec B101 - pytest assert in tests
    assert session.state is SessionState.CANCELLED  # nosec B101 - pytest assert in tests


def test_background_cancel_releases_blocked_read():
    response = BlockingResponse(frame(openai_delta("first")))
    rec = RecordingCallbacks()
    handle = _controller(FakeOpener(response)).open_in_background(make_request(), rec.callbacks())
    assert response.first_sent.wait(2.0)  # nosec B101 - pytest assert in tests
    handle.cancel()
    assert handle.join(2.0)  # nosec B101 - pytest assert in tests
    assert handle.session.state is SessionState.CANCELLED  # nosec B101 - pytest assert in tests
    assert rec.updates == ["first"]  # nosec B101 - pytest assert in tests
    assert rec.terminal_count == 0  # nosec B101 - pytest assert in tests
    assert response.closed  # nosec B101 - pytest assert in tests


def test_background_session_completes():
    rec = RecordingCallbacks()
    opener = FakeOpener(FakeResponse([sse(openai_delta("a"), usage_frame(1, 2, 3))]))
    handle = _controller(opener).open_in_background(make_request(), rec.callbacks())
    assert handle.join(2.0) and handle.done  # nosec B101 - pytest assert in tests
    assert rec.updates == ["a"]  # nosec B101 - pytest assert in tests
    assert rec.finishes == [UsageReport(1, 2, 3)]  # nosec B101 - pytest assert in tests


def test_terminal_log_event_carries_metrics(log_capture):
    rec, session, _ = _run([sse(openai_delta("a"), openai_delta("b"), usage_frame(2, 3, 5))])
    (end,) = log_capture.events("stream.session.end")
    assert end["session_id"] == session.session_id  # nosec B101 - pytest assert in tests
    assert end["phase"] == "finalize"  # nosec B101 - pytest assert in tests
    assert end["emitted"] is True and end["emitted_count"] == 2  # nosec B101 - pytest assert in tests
    assert end["tokens"] == {"prompt": 2, "completion": 3, "total": 5}  # nosec B101
    assert "error_code" not in end  # nosec B101 - pytest assert in tests
    assert log_capture.events("stream.usage.absent") == []  # nosec B101 - pytest assert in tests


def test_absent_usage_is_debug_event_only(log_capture):
    rec, _, _ = _run([sse(openai_delta("a"))])
    assert rec.finishes == [None]  # nosec B101 - pytest assert in tests
    (absent,) = log_capture.events("stream.usage.absent")
    assert absent["_level"] == 10  # nosec B101 - pytest assert in tests


def test_error_log_event_has_error_code(log_capture):
    _run([], status_code=503)
    (err,) = log_capture.events("stream.session.error")
    assert err["error_code"] == "unavailable"  # nosec B101 - pytest assert in tests
    assert err["status_code"] == 503  # nosec B101 - pytest assert in tests
    assert err["_level"] == 30  # nosec B101 - pytest assert in tests
