"""SQLite access repositories and Unit of Work semantics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gateway_client.base.models import ModelDescriptor
from gateway_client.persistence.interfaces import TierRecord
from gateway_client.persistence.sqlite.quota_repo import roll_window

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_tier_upsert_and_update(uow):
    with uow:
        uow.tiers.upsert_tier(TierRecord("u1", "free", 10.0, 5000.0, T0))
        uow.tiers.upsert_tier(TierRecord("u1", "pro", 20.0, 50000.0, None))
    rec = uow.tiers.get_tier("u1")
    assert rec == TierRecord("u1", "pro", 20.0, 50000.0, None)  # nosec B101 - pytest assert in tests
    assert uow.tiers.get_tier("missing") is None  # nosec B101 - pytest assert in tests


def test_naive_reset_at_is_stored_as_utc(uow):
    with uow:
        uow.tiers.upsert_tier(TierRecord("u1", "free", reset_at=datetime(2026, 2, 1, 8, 30)))
    assert uow.tiers.get_tier("u1").reset_at == datetime(2026, 2, 1, 8, 30, tzinfo=timezone.utc)  # nosec B101


def test_unit_of_work_rolls_back_on_error(uow):
    with pytest.raises(RuntimeError):
        with uow:
            uow.tiers.upsert_tier(TierRecord("u1", "max"))
            raise RuntimeError("abort")
    assert uow.tiers.get_tier("u1") is None  # nosec B101 - pytest assert in tests


def test_catalog_lists_only_active_in_order(uow):
    with uow:
        count = uow.catalog.upsert_many(
            [
                ModelDescriptor("openai", "b", "Beta"),
                ModelDescriptor("anthropic", "z", "Zed", input_price=1.5, context_window=200000),
                ModelDescriptor("openai", "a", "Alpha", is_active=False),
            ]
        )
    assert count == 3  # nosec B101 - pytest assert in tests
    active = uow.catalog.list_active()
    assert [(m.provider, m.model) for m in active] == [("anthropic", "z"), ("openai", "b")]  # nosec B101
    assert active[0].input_price == 1.5 and active[0].context_window == 200000  # nosec B101
    assert len(uow.catalog.list_all()) == 3  # nosec B101 - pytest assert in tests


def test_catalog_upsert_updates_existing_row(uow):
    with uow:
        uow.catalog.upsert_many([ModelDescriptor("openai", "gpt", "GPT", "free")])
        uow.catalog.upsert_many([ModelDescriptor("openai", "gpt", "GPT (pro)", "pro", is_active=False)])
    (row,) = uow.catalog.list_all()
    assert row.display_name == "GPT (pro)" and row.tier_required == "pro" and not row.is_active  # nosec B101


def test_quota_fills_defaults_from_tier(uow):
    with uow:
        uow.tiers.upsert_tier(TierRecord("u1", "pro"))
    status = uow.quotas.get_quota_status("u1", now=T0)
    assert (status.credits_balance, status.credits_limit, status.reset_at) == (50000.0, 50000.0, None)  # nosec B101


def test_quota_in_window_is_reported_as_stored(uow):
    with uow:
        uow.tiers.upsert_tier(TierRecord("u1", "free", 0.0, 5000.0, T0 + timedelta(days=1)))
    status = uow.quotas.get_quota_status("u1", now=T0)
    assert status.exhausted and status.reset_at == T0 + timedelta(days=1)  # nosec B101 - pytest assert in tests


def test_roll_window_skips_whole_periods():
    period = timedelta(days=30)
    assert roll_window(T0, T0 - timedelta(seconds=1), period) == T0  # nosec B101 - pytest assert in tests
    assert roll_window(T0, T0, period) == T0 + period  # nosec B101 - pytest assert in tests
    assert roll_window(T0, T0 + timedelta(days=65), period) == T0 + 3 * period  # nosec B101
