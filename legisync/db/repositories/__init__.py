"""
Repository package for data access operations.

Implements repository pattern for abstracting database operations.
"""

from .bill_repository import (
    BillPersistenceOutcome,
    BillPersistenceStatus,
    BillRepository,
)
from .sync_log_repository import SyncLogRepository

__all__ = [
    "BillPersistenceOutcome",
    "BillPersistenceStatus",
    "BillRepository",
    "SyncLogRepository",
]
