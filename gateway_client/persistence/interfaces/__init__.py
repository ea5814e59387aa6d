"""Persistence interfaces for access data.

Defines repository protocols and the shared ``TierRecord`` DTO, plus a Unit of
Work abstraction. Concrete implementations live under persistence adapters
such as SQLite.
"""

from .repos import (  # noqa: F401
    IModelCatalogRepo,
    IQuotaRepo,
    ITierRepo,
    IUnitOfWork,
    TierRecord,
)
