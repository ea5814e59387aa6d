"""Access/quota gate.

Answers two questions for a user: which catalog models may they request, and
how much quota do they have left. Every call reads storage afresh; nothing is
cached between calls.

Failure semantics
-----------------
Storage errors never reach the caller:

* tier lookup fails or the user has no row -> treated as ``free``
* catalog lookup fails                      -> empty list
* quota lookup fails                        -> tier-based estimate, else ``None``

Each degradation is logged with a ``access.*`` event.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelDescriptor, QuotaStatus
from ..config.defaults import DEFAULT_TIER, TIER_DEFAULT_CREDIT_LIMITS
from ..persistence.interfaces import IUnitOfWork
from .tiers import UnknownTierPolicy, normalize_tier, tier_rank, user_tier_rank


def _short_error(exc: Exception) -> str:
    return f"{exc.__class__.__name__}: {exc}"[:200]


class AccessGate:
    """Tier and quota checks over an :class:`IUnitOfWork`."""

    def __init__(
        self,
        uow: IUnitOfWork,
        *,
        unknown_tier_policy: "UnknownTierPolicy | str" = UnknownTierPolicy.PERMISSIVE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._uow = uow
        self._policy = UnknownTierPolicy.parse(unknown_tier_policy)
        self._logger = logger or get_logger(__name__)

    @property
    def unknown_tier_policy(self) -> UnknownTierPolicy:
        return self._policy

    def get_quota_status(self, user_id: str, *, now: Optional[datetime] = None) -> Optional[QuotaStatus]:
        """Return the user's quota or ``None`` when it cannot be determined.

        The primary read applies window resets. If it fails or finds nothing,
        the tier row alone is used with the tier's default credit limit.
        """
        ctx = LogContext(user_id=user_id)
        try:
            status = self._uow.quotas.get_quota_status(user_id, now=now)
        except Exception as exc:  # noqa: BLE001 - degrade to the tier estimate
            log_event(self._logger, "access.quota.primary_failed", ctx, level=logging.WARNING, error=_short_error(exc))
            status = None
        if status is not None:
            return status

        try:
            record = self._uow.tiers.get_tier(user_id)
        except Exception as exc:  # noqa: BLE001
            log_event(self._logger, "access.quota.lookup_failed", ctx, level=logging.WARNING, error=_short_error(exc))
            return None
        if record is None:
            log_event(self._logger, "access.quota.lookup_failed", ctx, level=logging.WARNING, error="no tier record")
            return None

        tier = normalize_tier(record.tier) or DEFAULT_TIER
        limit = float(TIER_DEFAULT_CREDIT_LIMITS[tier])
        balance = record.credits_balance if record.credits_balance is not None else limit
        log_event(self._logger, "access.quota.fallback", ctx, tier=tier, credits_limit=limit)
        return QuotaStatus(credits_balance=balance, credits_limit=limit, reset_at=record.reset_at, tier=tier)

    def list_available_models(self, user_id: Optional[str]) -> List[ModelDescriptor]:
        """Return the active models the user's tier unlocks.

        Ordered by provider, then display name. An anonymous or unknown user
        is treated as ``free``.
        """
        ctx = LogContext(user_id=user_id)
        user_rank = user_tier_rank(self._lookup_user_tier(user_id, ctx))
        try:
            catalog = self._uow.catalog.list_active()
        except Exception as exc:  # noqa: BLE001
            log_event(self._logger, "access.catalog.lookup_failed", ctx, level=logging.WARNING, error=_short_error(exc))
            return []

        available: List[ModelDescriptor] = []
        for descriptor in catalog:
            if not descriptor.is_active:
                continue
            required = self._required_rank(descriptor, ctx)
            if required is not None and required <= user_rank:
                available.append(descriptor)
        available.sort(key=lambda d: (d.provider, d.display_name))
        return available

    def _lookup_user_tier(self, user_id: Optional[str], ctx: LogContext) -> Optional[str]:
        if not user_id:
            return None
        try:
            record = self._uow.tiers.get_tier(user_id)
        except Exception as exc:  # noqa: BLE001 - unknown means free
            log_event(self._logger, "access.tier.lookup_failed", ctx, level=logging.WARNING, error=_short_error(exc))
            return None
        return record.tier if record else None

    def _required_rank(self, descriptor: ModelDescriptor, ctx: LogContext) -> Optional[int]:
        # Only a missing requirement means free; an empty name goes through the policy.
        required = DEFAULT_TIER if descriptor.tier_required is None else descriptor.tier_required
        rank = tier_rank(required)
        if rank is not None:
            return rank
        log_event(
            self._logger,
            "access.tier.unrecognized",
            ctx,
            level=logging.WARNING,
            provider=descriptor.provider,
            model=descriptor.model,
            tier_required=descriptor.tier_required,
            policy=self._policy.value,
        )
        return tier_rank(DEFAULT_TIER) if self._policy is UnknownTierPolicy.PERMISSIVE else None


__all__ = ["AccessGate"]
