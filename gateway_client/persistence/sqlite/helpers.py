"""Row conversion helpers shared by the SQLite access repositories.

Timestamps are stored as ISO8601 text and returned as aware UTC datetimes.
"""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime, timezone
from typing import Any, Optional

from ...base.models import ModelDescriptor
from ..interfaces.repos import TierRecord


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    """Parse a stored timestamp into an aware UTC ``datetime``; ``None`` if unusable."""
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, str) and raw:
        with suppress(ValueError):
            dt = datetime.fromisoformat(raw)
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return None


def _format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _optional_float(raw: Any) -> Optional[float]:
    return float(raw) if raw is not None else None


def _optional_int(raw: Any) -> Optional[int]:
    return int(raw) if raw is not None else None


def _tier_from_row(r: Any) -> TierRecord:
    """Convert a ``user_tiers`` row (user_id, tier, balance, limit, reset_at)."""
    return TierRecord(
        user_id=r[0],
        tier=r[1],
        credits_balance=_optional_float(r[2]),
        credits_limit=_optional_float(r[3]),
        reset_at=_parse_timestamp(r[4]),
    )


def _descriptor_from_row(r: Any) -> ModelDescriptor:
    """Convert a ``model_configs`` row in ``DESCRIPTOR_COLUMNS`` order."""
    return ModelDescriptor(
        provider=r[0],
        model=r[1],
        display_name=r[2],
        tier_required=r[3] or "free",
        is_active=bool(r[4]),
        context_window=_optional_int(r[5]),
        max_tokens=_optional_int(r[6]),
        input_price=_optional_float(r[7]),
        output_price=_optional_float(r[8]),
    )


DESCRIPTOR_COLUMNS = (
    "provider, model, display_name, tier_required, is_active, "
    "context_window, max_tokens, input_price, output_price"
)
