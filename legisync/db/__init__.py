"""
Database package for LegiSync.

Provides ORM models, session management, and repository pattern
for data persistence.
"""

from .models import Base, BillModel, SyncLogModel
from .session import Database

__all__ = [
    "Base",
    "BillModel",
    "SyncLogModel",
    "Database",
]
