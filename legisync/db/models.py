"""
SQLAlchemy database models for LegiSync.

Two tables: `bills` (the bill store, system of record for the browsing UI
and insight services) and `sync_log` (append-only record of adapter runs).

Responsibility: Define database schema and ORM mappings
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..models.bill import BillSource, BillStatus
from ..models.sync_models import SyncLogStatus
from ..utils.time_utils import utc_now


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{value.value}'" for value in values)
    return f"{column} IN ({quoted})"


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


class BillModel(Base):
    """
    Database model for canonical bills.

    `external_id` is the natural key used by the upsert; `id` is assigned
    on insert and never changes.
    """

    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Natural key and provenance
    external_id: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    bill_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Content
    title: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    full_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=BillStatus.INTRODUCED.value,
        index=True
    )
    introduced_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Other", index=True)
    sponsor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    official_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Opaque lists copied from source payloads
    cosponsors: Mapped[Optional[List[Any]]] = mapped_column(JSON, nullable=True)
    committees: Mapped[Optional[List[Any]]] = mapped_column(JSON, nullable=True)

    # AI-derived, written by insight services only
    impact_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    stages: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    arguments: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)

    # Timestamps
    last_synced: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now
    )

    __table_args__ = (
        UniqueConstraint('external_id', name='uq_bill_external_id'),
        Index('idx_bill_status_introduced', 'status', 'introduced_date'),
        Index('idx_bill_source_synced', 'source', 'last_synced'),
        CheckConstraint(_in_clause('status', BillStatus), name='ck_bill_status_vocabulary'),
        CheckConstraint(_in_clause('source', BillSource), name='ck_bill_source_vocabulary'),
    )

    def __repr__(self) -> str:
        return (
            f"<BillModel(id={self.id}, "
            f"external_id={self.external_id}, "
            f"status={self.status})>"
        )


class SyncLogModel(Base):
    """
    Database model for sync runs.

    One row per adapter invocation, created in_progress and moved once to
    completed or failed. Rows are never deleted.
    """

    __tablename__ = "sync_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    source: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SyncLogStatus.IN_PROGRESS.value,
        index=True
    )

    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    bills_synced: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    failed_records: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index('idx_sync_log_source_started', 'source', 'started_at'),
        Index('idx_sync_log_status_started', 'status', 'started_at'),
        CheckConstraint(_in_clause('status', SyncLogStatus), name='ck_sync_log_status'),
    )

    def __repr__(self) -> str:
        return (
            f"<SyncLogModel(id={self.id}, "
            f"source={self.source}, "
            f"status={self.status})>"
        )
