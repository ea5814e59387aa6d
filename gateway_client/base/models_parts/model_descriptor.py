"""
ModelDescriptor: one row of the administrative model catalog.

Read-only reference data. The access gate re-reads it on every availability
check so an admin deactivating a model takes effect immediately.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ModelDescriptor:
    """A model the gateway can route to.

    Attributes:
        provider: Upstream provider key (e.g. ``"openai"``).
        model: Model identifier sent in ``ChatRequest.model``.
        display_name: Human-friendly name; second sort key for listings.
        tier_required: Minimum subscription tier name. Kept as the raw stored
            string; unrecognized values are resolved by the tier policy.
        is_active: Inactive models are never offered.
        context_window: Optional maximum context size in tokens.
        max_tokens: Optional maximum output tokens.
        input_price: Optional USD price per million prompt tokens.
        output_price: Optional USD price per million completion tokens.
    """

    provider: str
    model: str
    display_name: str
    tier_required: str = "free"
    is_active: bool = True
    context_window: Optional[int] = None
    max_tokens: Optional[int] = None
    input_price: Optional[float] = None
    output_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ModelDescriptor"]
