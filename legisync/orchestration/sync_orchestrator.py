"""
Multi-source sync orchestration.

Runs every configured source adapter in turn and folds their outcomes into
one SyncReport. A failing source is recorded in the report and never stops
the sources after it.

Responsibility: Sequence adapter runs and aggregate the sync report
"""

from typing import Dict, List, Optional
import logging

import httpx

from ..adapters.base_adapter import BaseAdapter
from ..adapters.congress_bills import CongressBillsAdapter
from ..adapters.govtrack_bills import GovTrackBillsAdapter
from ..adapters.openstates_bills import OpenStatesBillsAdapter
from ..config import Settings
from ..db.repositories import SyncLogRepository
from ..db.session import Database
from ..errors import LegiSyncError
from ..models.sync_models import SourceSyncResult, SyncReport
from ..utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def default_adapters(
    settings: Settings,
    database: Database,
    client: Optional[httpx.AsyncClient] = None,
) -> List[BaseAdapter]:
    """The three production sources, in run order."""
    return [
        CongressBillsAdapter(settings, database, client=client),
        GovTrackBillsAdapter(settings, database, client=client),
        OpenStatesBillsAdapter(settings, database, client=client),
    ]


class SyncOrchestrator:
    """
    Orchestrates one full sync across all sources.

    Adapters run sequentially. Each adapter's exception is caught here and
    turned into a failed source entry; the report itself is only
    unsuccessful if the orchestrator cannot run at all.

    Example:
        orchestrator = SyncOrchestrator(settings, db)
        report = await orchestrator.run()
        print(report.total_bills_synced, report.failed_sources)
    """

    def __init__(
        self,
        settings: Settings,
        database: Database,
        adapters: Optional[List[BaseAdapter]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Application settings
            database: Initialized database
            adapters: Adapters to run (defaults to the three production sources)
        """
        self.settings = settings
        self.database = database
        self.adapters = adapters if adapters is not None else default_adapters(settings, database)
        self.sync_log = SyncLogRepository(database)

    async def run(self) -> SyncReport:
        """
        Run every adapter once and aggregate the results.

        Returns:
            SyncReport keyed by adapter source key
        """
        logger.info(f"Starting legislative data sync ({len(self.adapters)} sources)")

        try:
            abandoned = await self.sync_log.mark_stale_failed(
                self.settings.sync.stale_after_minutes
            )
        except LegiSyncError as e:
            logger.error(f"Stale sync sweep failed, continuing: {e.message}")
            abandoned = 0

        sources: Dict[str, SourceSyncResult] = {}

        for adapter in self.adapters:
            key = adapter.source_key
            try:
                result = await adapter.sync()
                sources[key] = SourceSyncResult(
                    success=True,
                    count=result.count,
                    failed_records=result.failed_records,
                )
            except LegiSyncError as e:
                logger.error(f"Error syncing {adapter.source_label}: {e.message}")
                sources[key] = SourceSyncResult(success=False, count=0, error=e.message)
            except Exception as e:
                logger.exception(f"Unexpected error syncing {adapter.source_label}")
                sources[key] = SourceSyncResult(
                    success=False,
                    count=0,
                    error=str(e) or type(e).__name__,
                )

        report = SyncReport(
            success=True,
            total_bills_synced=sum(result.count for result in sources.values()),
            sources=sources,
            abandoned_runs=abandoned,
            timestamp=utc_now(),
        )

        if report.all_failed:
            logger.error("Sync completed but every source failed")
        elif report.failed_sources:
            logger.warning(f"Sync completed with failed sources: {', '.join(report.failed_sources)}")

        logger.info(f"Sync completed. Total bills synced: {report.total_bills_synced}")
        return report
