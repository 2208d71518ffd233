"""
FastAPI dependencies.

Everything request handlers need is built from objects the application
lifespan puts on app.state: the Settings, the initialized Database and an
optional shared outbound HTTP client.

Responsibility: Provide settings, sessions and services to endpoints
"""

from typing import AsyncGenerator, Optional

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from legisync.config import Settings
from legisync.db.session import Database
from legisync.orchestration.sync_orchestrator import SyncOrchestrator, default_adapters
from legisync.services.ai_gateway import AIGatewayClient
from legisync.services.insight_service import InsightService
from legisync.services.representative_service import RepresentativeService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_http_client(request: Request) -> Optional[httpx.AsyncClient]:
    return getattr(request.app.state, "http_client", None)


async def get_db(database: Database = Depends(get_database)) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session that commits on success."""
    async with database.session() as session:
        yield session


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    database: Database = Depends(get_database),
    client: Optional[httpx.AsyncClient] = Depends(get_http_client),
) -> SyncOrchestrator:
    return SyncOrchestrator(
        settings,
        database,
        adapters=default_adapters(settings, database, client=client),
    )


def get_insight_service(
    settings: Settings = Depends(get_settings),
    database: Database = Depends(get_database),
    client: Optional[httpx.AsyncClient] = Depends(get_http_client),
) -> InsightService:
    return InsightService(
        settings,
        database,
        gateway=AIGatewayClient(settings.ai, client=client),
    )


def get_representative_service(
    settings: Settings = Depends(get_settings),
    client: Optional[httpx.AsyncClient] = Depends(get_http_client),
) -> RepresentativeService:
    return RepresentativeService(settings.civic, client=client)
