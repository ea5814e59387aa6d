"""Model availability and quota checks for gateway users."""

from .gate import AccessGate
from .pricing import estimate_cost
from .tiers import UnknownTierPolicy, normalize_tier, tier_rank, user_tier_rank

__all__ = ["AccessGate", "UnknownTierPolicy", "estimate_cost", "normalize_tier", "tier_rank", "user_tier_rank"]
