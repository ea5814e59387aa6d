"""Event classifier and provider-shape normalizer.

The gateway aggregates several upstream providers but still forwards their
native streaming shapes. This module maps every payload onto one of the
canonical events in :mod:`.events` so callers never see the difference.

Classification order for one payload:
    1. ``[DONE]`` sentinel               -> ``Terminal(COMPLETED)``
    2. not JSON                          -> ``MalformedFrameError``
    3. ``{"type": "usage", "usage": …}`` -> ``UsageReport``
    4. text matchers, first non-empty match wins -> ``ContentDelta``
    5. anything else                     -> no event

Text matchers are plain functions ``payload -> Optional[str]``. Supporting a
new provider means appending one to ``TEXT_MATCHERS``; the controller and
the callback contract stay untouched.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional, Tuple

from pydantic import ValidationError

from ..dto.usage import UsageCountsDTO
from ..errors import MalformedFrameError
from ..logging import LogContext, get_logger, log_event
from .events import COMPLETED, ContentDelta, NormalizedEvent, RawFrame

TextMatcher = Callable[[Mapping[str, Any]], Optional[str]]


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, Mapping) else None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def match_openai_delta(payload: Mapping[str, Any]) -> Optional[str]:
    """``{"choices": [{"delta": {"content": "..."}}]}``"""
    return _text(_get(_get(_first(payload.get("choices")), "delta"), "content"))


def match_anthropic_delta(payload: Mapping[str, Any]) -> Optional[str]:
    """``{"delta": {"text": "..."}}``"""
    return _text(_get(payload.get("delta"), "text"))


def match_google_candidate(payload: Mapping[str, Any]) -> Optional[str]:
    """``{"candidates": [{"content": {"parts": [{"text": "..."}]}}]}``"""
    content = _get(_first(payload.get("candidates")), "content")
    return _text(_get(_first(_get(content, "parts")), "text"))


TEXT_MATCHERS: Tuple[TextMatcher, ...] = (
    match_openai_delta,
    match_anthropic_delta,
    match_google_candidate,
)


def extract_text(payload: Mapping[str, Any], matchers: Tuple[TextMatcher, ...] = TEXT_MATCHERS) -> Optional[str]:
    """Return the text of the first matcher that yields a non-empty string."""
    for matcher in matchers:
        text = matcher(payload)
        if text:
            return text
    return None


def classify_payload(
    payload: str,
    *,
    is_done: bool = False,
    matchers: Tuple[TextMatcher, ...] = TEXT_MATCHERS,
) -> Optional[NormalizedEvent]:
    """Classify one frame payload into at most one normalized event.

    Raises:
        MalformedFrameError: payload is not JSON, or is a usage frame whose
            counts fail validation.
    """
    if is_done:
        return COMPLETED
    try:
        parsed = json.loads(payload)
    except ValueError as exc:
        raise MalformedFrameError(message=f"frame is not valid JSON: {exc}", raw=exc) from exc
    if not isinstance(parsed, dict):
        return None
    if parsed.get("type") == "usage" and parsed.get("usage") is not None:
        try:
            return UsageCountsDTO.model_validate(parsed["usage"]).to_report()
        except ValidationError as exc:
            raise MalformedFrameError(message=f"usage frame rejected: {exc.error_count()} error(s)", raw=exc) from exc
    text = extract_text(parsed, matchers)
    return ContentDelta(text) if text else None


class Normalizer:
    """Frame-level wrapper around :func:`classify_payload` that never raises.

    Malformed frames are logged at WARNING and yield ``None`` so one bad
    frame never ends an otherwise healthy stream.
    """

    def __init__(
        self,
        *,
        matchers: Tuple[TextMatcher, ...] = TEXT_MATCHERS,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._matchers = matchers
        self._logger = logger or get_logger(__name__)
        self._ctx = ctx
        self.malformed_count = 0

    def normalize(self, frame: RawFrame) -> Optional[NormalizedEvent]:
        try:
            return classify_payload(frame.payload, is_done=frame.is_done, matchers=self._matchers)
        except MalformedFrameError as exc:
            self.malformed_count += 1
            log_event(
                self._logger,
                "stream.frame.malformed",
                self._ctx,
                level=logging.WARNING,
                error_code=exc.code.value,
                error=exc.message[:200],
                payload_len=len(frame.payload),
            )
            return None


__all__ = [
    "TextMatcher",
    "TEXT_MATCHERS",
    "match_openai_delta",
    "match_anthropic_delta",
    "match_google_candidate",
    "extract_text",
    "classify_payload",
    "Normalizer",
]
