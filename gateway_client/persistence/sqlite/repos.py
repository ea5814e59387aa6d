"""Public re-exports for the SQLite access repositories and Unit of Work."""

from .model_catalog_repo import ModelCatalogRepoSqlite
from .quota_repo import QuotaRepoSqlite
from .tier_repo import TierRepoSqlite
from .unit_of_work import UnitOfWorkSqlite

__all__ = [
    "TierRepoSqlite",
    "QuotaRepoSqlite",
    "ModelCatalogRepoSqlite",
    "UnitOfWorkSqlite",
]
