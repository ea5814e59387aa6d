"""Unit of Work over one SQLite connection.

Groups the tier, quota and catalog repositories. Leaving the ``with`` block
commits; leaving it through an exception rolls back. Repositories never
commit on their own, so a seed import is all-or-nothing.
"""

from __future__ import annotations

import sqlite3
from types import TracebackType
from typing import Optional, Type

from ..interfaces.repos import IUnitOfWork
from .model_catalog_repo import ModelCatalogRepoSqlite
from .quota_repo import QuotaRepoSqlite
from .tier_repo import TierRepoSqlite


class UnitOfWorkSqlite(IUnitOfWork):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self.tiers = TierRepoSqlite(conn)
        self.quotas = QuotaRepoSqlite(conn)
        self.catalog = ModelCatalogRepoSqlite(conn)

    def __enter__(self) -> "UnitOfWorkSqlite":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()


__all__ = ["UnitOfWorkSqlite"]
