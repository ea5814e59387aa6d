"""SQLite-backed implementation of ``IModelCatalogRepo``."""

from __future__ import annotations

import sqlite3
from typing import Iterable, List

from ...base.models import ModelDescriptor
from ..interfaces.repos import IModelCatalogRepo
from .helpers import DESCRIPTOR_COLUMNS, _descriptor_from_row


class ModelCatalogRepoSqlite(IModelCatalogRepo):
    """Model catalog stored in ``model_configs``. No implicit commits."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def list_active(self) -> List[ModelDescriptor]:
        # DESCRIPTOR_COLUMNS is a module constant, not user input.
        cur = self.conn.execute(
            f"SELECT {DESCRIPTOR_COLUMNS} FROM model_configs WHERE is_active = 1 "  # nosec B608
            "ORDER BY provider ASC, display_name ASC"
        )
        return [_descriptor_from_row(r) for r in cur.fetchall()]

    def list_all(self) -> List[ModelDescriptor]:
        cur = self.conn.execute(
            f"SELECT {DESCRIPTOR_COLUMNS} FROM model_configs ORDER BY provider ASC, display_name ASC"  # nosec B608
        )
        return [_descriptor_from_row(r) for r in cur.fetchall()]

    def upsert_many(self, descriptors: Iterable[ModelDescriptor]) -> int:
        count = 0
        for d in descriptors:
            self.conn.execute(
                f"INSERT INTO model_configs({DESCRIPTOR_COLUMNS}, updated_at) "  # nosec B608
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(provider, model) DO UPDATE SET display_name=excluded.display_name, "
                "tier_required=excluded.tier_required, is_active=excluded.is_active, "
                "context_window=excluded.context_window, max_tokens=excluded.max_tokens, "
                "input_price=excluded.input_price, output_price=excluded.output_price, "
                "updated_at=CURRENT_TIMESTAMP",
                (
                    d.provider,
                    d.model,
                    d.display_name,
                    d.tier_required,
                    1 if d.is_active else 0,
                    d.context_window,
                    d.max_tokens,
                    d.input_price,
                    d.output_price,
                ),
            )
            count += 1
        return count
