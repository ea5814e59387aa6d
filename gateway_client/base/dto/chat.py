"""
Pydantic DTOs validating caller input before a ChatRequest is built.

Validation either succeeds or raises ``pydantic.ValidationError``; the
client surfaces that to the caller directly, before any session exists.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..models import ChatRequest, Message

Role = Literal["system", "user", "assistant"]


class MessageDTO(BaseModel):
    """A chat message; content must contain visible text."""

    role: Role
    content: str

    @model_validator(mode="after")
    def _validate_content(self) -> "MessageDTO":
        if not self.content.strip():
            raise ValueError("content string must be non-empty")
        return self


class ChatRequestDTO(BaseModel):
    """Validated request parameters.

    Raises:
        ValidationError: empty model, no messages, empty content, temperature
            outside [0, 2], or a non-positive ``max_tokens``.
    """

    model: str = Field(..., min_length=1)
    messages: List[MessageDTO] = Field(..., min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    conversation_id: Optional[str] = None

    def to_request(self) -> ChatRequest:
        """Convert into the immutable domain request."""
        return ChatRequest.of(
            self.model,
            (Message(role=m.role, content=m.content) for m in self.messages),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            conversation_id=self.conversation_id,
        )


__all__ = ["Role", "MessageDTO", "ChatRequestDTO"]
