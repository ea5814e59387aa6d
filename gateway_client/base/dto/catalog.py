"""
Pydantic DTOs for seed documents (model catalog rows and user tiers).

Seed files are hand-edited, so unknown keys are ignored and prices may be
given as strings; the DTOs coerce them before anything reaches SQLite.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import ModelDescriptor


class ModelDescriptorDTO(BaseModel):
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    display_name: Optional[str] = None
    tier_required: str = "free"
    is_active: bool = True
    context_window: Optional[int] = Field(default=None, gt=0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    input_price: Optional[float] = Field(default=None, ge=0.0)
    output_price: Optional[float] = Field(default=None, ge=0.0)

    def to_descriptor(self) -> ModelDescriptor:
        """Build the domain descriptor; ``display_name`` defaults to the model id."""
        return ModelDescriptor(
            provider=self.provider,
            model=self.model,
            display_name=self.display_name or self.model,
            tier_required=self.tier_required,
            is_active=self.is_active,
            context_window=self.context_window,
            max_tokens=self.max_tokens,
            input_price=self.input_price,
            output_price=self.output_price,
        )


class UserTierDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., min_length=1)
    tier: str = "free"
    credits_balance: Optional[float] = None
    credits_limit: Optional[float] = Field(default=None, ge=0.0)
    reset_at: Optional[datetime] = None


__all__ = ["ModelDescriptorDTO", "UserTierDTO"]
