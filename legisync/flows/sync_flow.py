"""
Prefect flow for the scheduled legislative data sync.

Wraps SyncOrchestrator in a single task. The task has no retries: a failed
source is recorded in the sync log and picked up by the next scheduled run.

Responsibility: Schedule periodic multi-source bill syncs
"""

from typing import Any, Dict, Optional
import asyncio

import httpx
from prefect import flow, task, get_run_logger

from ..config import Settings, get_settings
from ..db.session import Database
from ..orchestration.sync_orchestrator import SyncOrchestrator, default_adapters


async def run_sync(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    Run one orchestrated sync and return the report as camelCase JSON.

    Owns the database only when none is passed in.

    Args:
        settings: Application settings (defaults to the process settings)
        database: Initialized database to reuse
        client: Shared outbound HTTP client for the adapters
    """
    settings = settings or get_settings()
    owns_database = database is None

    if owns_database:
        database = Database(settings.db)
        await database.initialize()

    try:
        adapters = default_adapters(settings, database, client=client)
        report = await SyncOrchestrator(settings, database, adapters=adapters).run()
        return report.model_dump(mode="json", by_alias=True)
    finally:
        if owns_database:
            await database.close()


@task(
    name="run_legislative_sync",
    description="Sync bills from Congress.gov, GovTrack and Open States",
    retries=0,
)
async def run_sync_task() -> Dict[str, Any]:
    logger = get_run_logger()
    logger.info("Starting legislative data sync task")

    report = await run_sync()

    failed = [name for name, result in report["sources"].items() if not result["success"]]
    if failed:
        logger.warning(f"Sources failed this run: {', '.join(failed)}")
    logger.info(f"Total bills synced: {report['totalBillsSynced']}")
    return report


@flow(
    name="sync_legislative_data",
    description="Scheduled sync of all legislative sources",
    log_prints=True,
)
async def sync_legislative_data_flow() -> Dict[str, Any]:
    """
    Master sync flow.

    Returns:
        SyncReport as a camelCase dictionary
    """
    logger = get_run_logger()
    logger.info("Starting master legislative data sync")

    report = await run_sync_task()

    logger.info(f"Master sync completed: {report['totalBillsSynced']} bills")
    return report


if __name__ == "__main__":
    settings = get_settings()
    if settings.sync.schedule_cron:
        sync_legislative_data_flow.serve(
            name="sync-legislative-data",
            cron=settings.sync.schedule_cron,
        )
    else:
        asyncio.run(sync_legislative_data_flow())
