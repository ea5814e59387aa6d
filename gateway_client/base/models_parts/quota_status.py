"""
QuotaStatus: a user's remaining credits as last read from storage.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class QuotaStatus:
    """Snapshot of a user's quota. Never mutated locally, only re-fetched.

    Attributes:
        credits_balance: Credits left in the current window.
        credits_limit: Credits granted per window.
        reset_at: When the window resets (aware UTC), if known.
        tier: Subscription tier name.
    """

    credits_balance: float
    credits_limit: float
    reset_at: Optional[datetime]
    tier: str

    @property
    def exhausted(self) -> bool:
        return self.credits_balance <= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "credits_balance": self.credits_balance,
            "credits_limit": self.credits_limit,
            "reset_at": self.reset_at.isoformat() if self.reset_at else None,
            "tier": self.tier,
        }


__all__ = ["QuotaStatus"]
