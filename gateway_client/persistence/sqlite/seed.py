"""Seed data import for the access database.

A seed document is a JSON or YAML mapping with optional ``models`` and
``users`` lists::

    models:
      - {provider: openai, model: gpt-4o-mini, display_name: GPT-4o mini}
      - {provider: anthropic, model: claude-sonnet, tier_required: pro,
         input_price: 3.0, output_price: 15.0}
    users:
      - {user_id: demo, tier: pro, credits_balance: 42000}

Entries are validated with pydantic and upserted, so re-running a seed is
idempotent. Invalid entries raise ``pydantic.ValidationError`` and nothing
from that call is committed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

import yaml

from ...base.dto import ModelDescriptorDTO, UserTierDTO
from ...base.models import ModelDescriptor
from ..interfaces.repos import IUnitOfWork, TierRecord

__all__ = [
    "read_seed_file",
    "seed_model_catalog",
    "seed_user_tiers",
    "import_seed_data",
]


def read_seed_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON or YAML seed document; raise ``ValueError`` unless it is a mapping."""
    text = Path(file_path).expanduser().read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"seed file {file_path} must contain a mapping")
    return data


def seed_model_catalog(uow: IUnitOfWork, entries: Iterable[Union[ModelDescriptor, Mapping[str, Any]]]) -> int:
    """Validate and upsert catalog rows in one transaction; return the row count."""
    descriptors = [
        e if isinstance(e, ModelDescriptor) else ModelDescriptorDTO.model_validate(dict(e)).to_descriptor()
        for e in entries
    ]
    with uow:
        return uow.catalog.upsert_many(descriptors)


def seed_user_tiers(uow: IUnitOfWork, entries: Iterable[Mapping[str, Any]]) -> int:
    """Validate and upsert ``user_tiers`` rows in one transaction; return the row count."""
    records = [TierRecord(**UserTierDTO.model_validate(dict(e)).model_dump()) for e in entries]
    with uow:
        for record in records:
            uow.tiers.upsert_tier(record)
    return len(records)


def import_seed_data(uow: IUnitOfWork, file_path: Union[str, Path]) -> Dict[str, int]:
    """Load a seed document and import both sections."""
    data = read_seed_file(file_path)
    return {
        "models": seed_model_catalog(uow, data.get("models") or []),
        "users": seed_user_tiers(uow, data.get("users") or []),
    }
