"""
Sync API endpoints.

Triggers a full multi-source sync and exposes the sync log.

Responsibility: Sync trigger and sync log endpoints for API v1
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_database, get_orchestrator
from api.v1.schemas.sync import SyncLogListResponse, SyncLogResponse
from legisync.db.repositories import SyncLogRepository
from legisync.db.session import Database
from legisync.orchestration.sync_orchestrator import SyncOrchestrator

router = APIRouter()


@router.post("/sync")
async def trigger_sync(orchestrator: SyncOrchestrator = Depends(get_orchestrator)):
    """
    Run every source adapter once and return the combined report.

    Answers 200 even when some (or all) sources failed; per-source outcomes
    are in `sources`.
    """
    report = await orchestrator.run()
    return report.model_dump(mode="json", by_alias=True)


@router.get("/sync/logs", response_model=SyncLogListResponse, response_model_by_alias=True)
async def list_sync_logs(
    source: Optional[str] = Query(None, description="Filter by source label (e.g., congress.gov)"),
    limit: int = Query(20, ge=1, le=200, description="Number of entries"),
    database: Database = Depends(get_database),
):
    """Most recent sync runs, newest first."""
    entries = await SyncLogRepository(database).get_recent(limit=limit, source=source)
    return {"logs": [SyncLogResponse.model_validate(entry) for entry in entries]}
