"""SQLite-backed implementation of ``IQuotaRepo``.

Reads the credit window from ``user_tiers``. A window whose ``reset_at`` has
passed is reported as a fresh one (full balance, next reset time) without
writing anything back; persisting the reset is the billing system's job.

A stored ``reset_at`` that cannot be parsed raises ``ValueError`` so callers
can fall back to a tier-only estimate.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...access.tiers import normalize_tier
from ...base.models import QuotaStatus
from ...config.defaults import DEFAULT_TIER, QUOTA_RESET_PERIOD_DAYS, TIER_DEFAULT_CREDIT_LIMITS
from ..interfaces.repos import IQuotaRepo


def _strict_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if raw is None:
        return None
    dt = datetime.fromisoformat(raw)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def roll_window(reset_at: datetime, now: datetime, period: timedelta) -> datetime:
    """Return the first reset time after ``now`` on the ``reset_at`` + k*``period`` grid."""
    if reset_at > now:
        return reset_at
    elapsed_periods = (now - reset_at) // period + 1
    return reset_at + elapsed_periods * period


class QuotaRepoSqlite(IQuotaRepo):
    """Quota view over ``user_tiers``."""

    def __init__(self, conn: sqlite3.Connection, *, period_days: int = QUOTA_RESET_PERIOD_DAYS) -> None:
        self.conn = conn
        self._period = timedelta(days=period_days)

    def get_quota_status(self, user_id: str, now: Optional[datetime] = None) -> Optional[QuotaStatus]:
        row = self.conn.execute(
            "SELECT tier, credits_balance, credits_limit, reset_at FROM user_tiers WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        if not row:
            return None
        # Unrecognized tier names read as the default tier.
        tier = normalize_tier(row[0]) or DEFAULT_TIER
        limit = float(row[2]) if row[2] is not None else float(TIER_DEFAULT_CREDIT_LIMITS[tier])
        balance = float(row[1]) if row[1] is not None else limit
        reset_at = _strict_timestamp(row[3])
        now = now or datetime.now(timezone.utc)
        if reset_at is not None and reset_at <= now:
            balance = limit
            reset_at = roll_window(reset_at, now, self._period)
        return QuotaStatus(credits_balance=balance, credits_limit=limit, reset_at=reset_at, tier=tier)
