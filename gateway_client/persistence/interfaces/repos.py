"""Repository & Unit of Work protocol definitions for access data.

The access gate depends only on these abstractions; concrete implementations
live under ``persistence/sqlite/`` (or any other backend that can answer the
same questions, e.g. a remote database client).

Design Principles:
- No concrete behavior; pure structural typing via ``Protocol``.
- Dataclasses represent DTOs crossing repository boundaries.
- Transaction control is delegated to the ``IUnitOfWork`` implementation.

Failure / Error Semantics:
- Repository methods raise backend-specific exceptions on I/O or integrity
  failures. The access gate translates them into documented fallbacks; it
  never lets them reach callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from ...base.models import ModelDescriptor, QuotaStatus


@dataclass
class TierRecord:
    """A user's subscription row.

    Attributes
    ----------
    user_id: Opaque user identifier.
    tier: Stored tier name (normally ``free``/``pro``/``max``).
    credits_balance: Credits left in the current window, if tracked.
    credits_limit: Credits per window, if tracked.
    reset_at: End of the current window (aware UTC), if tracked.
    """

    user_id: str
    tier: str
    credits_balance: Optional[float] = None
    credits_limit: Optional[float] = None
    reset_at: Optional[datetime] = None


class ITierRepo(Protocol):
    """Subscription tier lookup."""

    def get_tier(self, user_id: str) -> Optional[TierRecord]:
        """Return the user's tier row, or ``None`` when the user has none."""
        ...

    def upsert_tier(self, record: TierRecord) -> None:
        """Insert or replace a tier row (no implicit commit)."""
        ...


class IQuotaRepo(Protocol):
    """Quota lookup that applies window resets."""

    def get_quota_status(self, user_id: str, now: Optional[datetime] = None) -> Optional[QuotaStatus]:
        """Return the user's current quota, or ``None`` when untracked.

        When the stored window has already ended at ``now`` the status is
        reported as a fresh window: full balance and the next reset time.
        """
        ...


class IModelCatalogRepo(Protocol):
    """Administrative model catalog."""

    def list_active(self) -> List[ModelDescriptor]:
        """Return active models ordered by provider, then display name."""
        ...

    def upsert_many(self, descriptors: Iterable[ModelDescriptor]) -> int:
        """Insert or update descriptors keyed by (provider, model); return count."""
        ...


class IUnitOfWork(Protocol):
    """Groups the access repositories behind one transaction boundary."""

    tiers: ITierRepo
    quotas: IQuotaRepo
    catalog: IModelCatalogRepo

    def __enter__(self) -> "IUnitOfWork":
        ...

    def __exit__(self, exc_type, exc, tb) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
