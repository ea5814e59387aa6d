"""
Pydantic DTO for the gateway's usage frame.

Wire shape::

    {"type": "usage", "usage": {"promptTokens": 12, "completionTokens": 30, "totalTokens": 42}}

Missing counts default to 0; a missing ``totalTokens`` is derived from the
other two. Negative or non-integer counts fail validation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import UsageReport


class UsageCountsDTO(BaseModel):
    """Camel-cased token counts as emitted by the gateway."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    prompt_tokens: int = Field(default=0, ge=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, ge=0, alias="completionTokens")
    total_tokens: Optional[int] = Field(default=None, ge=0, alias="totalTokens")

    def to_report(self) -> UsageReport:
        total = self.total_tokens
        if total is None:
            total = self.prompt_tokens + self.completion_tokens
        return UsageReport(
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
            total_tokens=total,
        )


__all__ = ["UsageCountsDTO"]
