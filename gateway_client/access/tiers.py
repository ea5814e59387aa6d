"""Subscription tier ordering and the policy for unrecognized tier names."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..config.defaults import DEFAULT_TIER, TIER_ORDER

_RANK = {name: i for i, name in enumerate(TIER_ORDER)}


class UnknownTierPolicy(str, Enum):
    """How a model whose ``tier_required`` is not a known tier is treated.

    ``PERMISSIVE`` ranks it as the lowest tier (offered to everyone);
    ``RESTRICTIVE`` never offers it.
    """

    PERMISSIVE = "permissive"
    RESTRICTIVE = "restrictive"

    @classmethod
    def parse(cls, value: "str | UnknownTierPolicy | None") -> "UnknownTierPolicy":
        """Parse a config value case-insensitively; raise ``ValueError`` when unknown."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.PERMISSIVE
        return cls(str(value).strip().lower())


def tier_rank(tier: Optional[str]) -> Optional[int]:
    """Return the rank of a tier name (``free`` = 0), or ``None`` when unrecognized."""
    if tier is None:
        return None
    return _RANK.get(tier.strip().lower())


def normalize_tier(tier: Optional[str]) -> Optional[str]:
    """Canonical name of a known tier (``" Pro"`` -> ``"pro"``), or ``None`` when unrecognized."""
    rank = tier_rank(tier)
    return None if rank is None else TIER_ORDER[rank]


def user_tier_rank(tier: Optional[str]) -> int:
    """Rank of a user's tier; missing or unrecognized user tiers count as ``free``."""
    rank = tier_rank(tier)
    return rank if rank is not None else _RANK[DEFAULT_TIER]


__all__ = ["UnknownTierPolicy", "normalize_tier", "tier_rank", "user_tier_rank"]
