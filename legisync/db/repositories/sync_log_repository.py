"""
Repository for SyncLog database operations.

Every adapter run opens one entry in_progress and closes it exactly once as
completed or failed. Each operation uses its own short session so the log
stays correct even when the run's record writes roll back.

Responsibility: Persist and query sync run bookkeeping
"""

from datetime import datetime, timedelta
from typing import List, Optional
import logging

from sqlalchemy import desc, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..models import SyncLogModel
from ..session import Database
from ...errors import NotFoundError, PersistenceError
from ...models.sync_models import SyncLogStatus
from ...utils.time_utils import utc_now

logger = logging.getLogger(__name__)


class SyncLogRepository:
    """Repository for sync log operations."""

    def __init__(self, db: Database):
        """
        Initialize repository with database instance.

        Args:
            db: Database instance
        """
        self.db = db

    async def start(self, source: str) -> SyncLogModel:
        """
        Open an in_progress entry for one adapter run.

        Args:
            source: Upstream label (e.g., "congress.gov", "govtrack")

        Returns:
            Created SyncLogModel instance
        """
        try:
            async with self.db.session() as session:
                entry = SyncLogModel(
                    source=source,
                    status=SyncLogStatus.IN_PROGRESS.value,
                    started_at=utc_now(),
                )
                session.add(entry)
                await session.flush()
                await session.refresh(entry)
                return entry
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to open sync log for {source}: {e}") from e

    async def complete(
        self,
        log_id: int,
        bills_synced: int,
        failed_records: Optional[List[str]] = None,
    ) -> SyncLogModel:
        """
        Close an entry as completed.

        Args:
            log_id: Entry to close
            bills_synced: Number of records upserted
            failed_records: Identifiers of records skipped during the run
        """
        return await self._close(
            log_id,
            status=SyncLogStatus.COMPLETED,
            bills_synced=bills_synced,
            error_message=None,
            failed_records=failed_records or None,
        )

    async def fail(
        self,
        log_id: int,
        error_message: str,
        failed_records: Optional[List[str]] = None,
    ) -> SyncLogModel:
        """Close an entry as failed with bills_synced = 0."""
        return await self._close(
            log_id,
            status=SyncLogStatus.FAILED,
            bills_synced=0,
            error_message=error_message,
            failed_records=failed_records or None,
        )

    async def get(self, log_id: int) -> Optional[SyncLogModel]:
        """Get one entry by id"""
        async with self.db.session() as session:
            result = await session.execute(
                select(SyncLogModel).where(SyncLogModel.id == log_id)
            )
            return result.scalar_one_or_none()

    async def get_recent(
        self,
        limit: int = 20,
        source: Optional[str] = None,
    ) -> List[SyncLogModel]:
        """
        Get the most recent entries, newest first.

        Args:
            limit: Maximum results
            source: Optional source label filter
        """
        async with self.db.session() as session:
            query = select(SyncLogModel)
            if source:
                query = query.where(SyncLogModel.source == source)
            query = query.order_by(desc(SyncLogModel.started_at), desc(SyncLogModel.id)).limit(limit)

            result = await session.execute(query)
            return list(result.scalars().all())

    async def find_stale(self, older_than_minutes: int) -> List[SyncLogModel]:
        """Entries still in_progress that started before the cutoff."""
        cutoff = utc_now() - timedelta(minutes=older_than_minutes)

        async with self.db.session() as session:
            result = await session.execute(
                select(SyncLogModel)
                .where(SyncLogModel.status == SyncLogStatus.IN_PROGRESS.value)
                .where(SyncLogModel.started_at < cutoff)
                .order_by(SyncLogModel.started_at)
            )
            return list(result.scalars().all())

    async def mark_stale_failed(self, older_than_minutes: int) -> int:
        """
        Close abandoned in_progress entries as failed.

        A process that crashed mid-run leaves its entry in_progress forever;
        this is called before each orchestrator run.

        Returns:
            Number of entries closed
        """
        cutoff = utc_now() - timedelta(minutes=older_than_minutes)

        try:
            async with self.db.session() as session:
                result = await session.execute(
                    update(SyncLogModel)
                    .where(SyncLogModel.status == SyncLogStatus.IN_PROGRESS.value)
                    .where(SyncLogModel.started_at < cutoff)
                    .values(
                        status=SyncLogStatus.FAILED.value,
                        completed_at=utc_now(),
                        bills_synced=0,
                        error_message=f"Abandoned: still in progress after {older_than_minutes} minutes",
                    )
                )
                closed = result.rowcount or 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to close stale sync log entries: {e}") from e

        if closed:
            logger.warning(f"Marked {closed} stale sync log entries as failed")
        return closed

    async def _close(
        self,
        log_id: int,
        status: SyncLogStatus,
        bills_synced: int,
        error_message: Optional[str],
        failed_records: Optional[List[str]],
    ) -> SyncLogModel:
        """Move an in_progress entry to a terminal status exactly once."""
        completed_at: datetime = utc_now()

        try:
            async with self.db.session() as session:
                entry = await session.get(SyncLogModel, log_id)
                if entry is None:
                    raise NotFoundError(f"Sync log entry {log_id} not found")

                if entry.status != SyncLogStatus.IN_PROGRESS.value:
                    logger.warning(
                        f"Sync log entry {log_id} already {entry.status}; "
                        f"ignoring transition to {status.value}"
                    )
                    return entry

                entry.status = status.value
                entry.completed_at = completed_at
                entry.bills_synced = bills_synced
                entry.error_message = error_message
                entry.failed_records = failed_records
                await session.flush()
                return entry
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to close sync log entry {log_id}: {e}") from e
