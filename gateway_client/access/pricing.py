"""Cost estimation from reported token usage and catalog prices."""

from __future__ import annotations

from typing import Optional

from ..base.models import ModelDescriptor, UsageReport

TOKENS_PER_PRICE_UNIT = 1_000_000


def estimate_cost(usage: Optional[UsageReport], descriptor: ModelDescriptor) -> Optional[float]:
    """Return the USD cost of ``usage`` at the descriptor's per-million prices.

    ``None`` when usage is unknown or the descriptor has no prices at all; a
    single missing price counts as zero.
    """
    if usage is None:
        return None
    if descriptor.input_price is None and descriptor.output_price is None:
        return None
    prompt_cost = usage.prompt_tokens / TOKENS_PER_PRICE_UNIT * (descriptor.input_price or 0.0)
    completion_cost = usage.completion_tokens / TOKENS_PER_PRICE_UNIT * (descriptor.output_price or 0.0)
    return prompt_cost + completion_cost


__all__ = ["TOKENS_PER_PRICE_UNIT", "estimate_cost"]
