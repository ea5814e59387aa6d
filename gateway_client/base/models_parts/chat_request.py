"""
ChatRequest value sent to the gateway.

Constructed once per call and never mutated; the stream controller only
reads it to build the wire body.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .message import Message


@dataclass(frozen=True)
class ChatRequest:
    """Immutable chat request.

    Attributes:
        model: Target model identifier.
        messages: Ordered role-tagged messages.
        temperature: Optional sampling temperature.
        max_tokens: Optional output-token cap.
        conversation_id: Optional conversation the gateway records usage against.
    """

    model: str
    messages: Tuple[Message, ...]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    conversation_id: Optional[str] = None

    @classmethod
    def of(
        cls,
        model: str,
        messages: Iterable[Message],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        conversation_id: Optional[str] = None,
    ) -> "ChatRequest":
        """Build a request from any iterable of messages (frozen into a tuple)."""
        return cls(
            model=model,
            messages=tuple(messages),
            temperature=temperature,
            max_tokens=max_tokens,
            conversation_id=conversation_id,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body for the gateway; unset optionals are omitted."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.conversation_id is not None:
            body["conversationId"] = self.conversation_id
        if self.temperature is not None:
            body["temperature"] = self.temperature
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens
        body["stream"] = True
        return body


__all__ = ["ChatRequest"]
