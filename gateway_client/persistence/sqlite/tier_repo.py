"""SQLite-backed implementation of ``ITierRepo``."""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..interfaces.repos import ITierRepo, TierRecord
from .helpers import _format_timestamp, _tier_from_row


class TierRepoSqlite(ITierRepo):
    """Reads and writes ``user_tiers`` rows. No implicit commits."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get_tier(self, user_id: str) -> Optional[TierRecord]:
        row = self.conn.execute(
            "SELECT user_id, tier, credits_balance, credits_limit, reset_at FROM user_tiers WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return _tier_from_row(row) if row else None

    def upsert_tier(self, record: TierRecord) -> None:
        self.conn.execute(
            "INSERT INTO user_tiers(user_id, tier, credits_balance, credits_limit, reset_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(user_id) DO UPDATE SET tier=excluded.tier, credits_balance=excluded.credits_balance, "
            "credits_limit=excluded.credits_limit, reset_at=excluded.reset_at, updated_at=CURRENT_TIMESTAMP",
            (
                record.user_id,
                record.tier,
                record.credits_balance,
                record.credits_limit,
                _format_timestamp(record.reset_at),
            ),
        )
