"""
FastAPI application for the LegiSync API.

Serves stored bills, AI insights, representative lookup and the sync
trigger under /api/v1.

Responsibility: Main API application setup and configuration
"""

# Load .env BEFORE importing settings (critical for pydantic-settings)
from dotenv import load_dotenv
load_dotenv('.env')

from contextlib import asynccontextmanager
from typing import Optional
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.middleware.api_key_auth import APIKeyMiddleware
from legisync.config import Settings, get_settings
from legisync.db.session import Database
from legisync.errors import LegiSyncError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (defaults to the process settings)
        http_client: Shared outbound client for sources, AI gateway and
            civic lookup; each call opens its own client when omitted
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.app.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app.app_name} API...")
        logger.info(f"Environment: {settings.app.environment.value}")
        logger.info(f"API Key Required: {settings.app.require_api_key}")

        database = Database(settings.db)
        await database.initialize()
        if database.config.is_sqlite:
            # Deployed PostgreSQL databases are migrated with Alembic
            await database.create_tables()

        app.state.database = database
        try:
            yield
        finally:
            logger.info(f"Shutting down {settings.app.app_name} API...")
            await database.close()

    app = FastAPI(
        title=f"{settings.app.app_name} API",
        description="Legislative bill sync and AI insight API",
        version=settings.app.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.http_client = http_client

    logger.info(f"CORS Origins configured: {settings.app.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*", "X-API-Key"],
        max_age=3600,  # Cache preflight for 1 hour
    )

    if settings.app.require_api_key:
        app.add_middleware(
            APIKeyMiddleware,
            api_keys=settings.app.api_keys,
            protected_paths=["/api/v1/sync"],
        )
    else:
        logger.warning("API key middleware disabled; sync endpoints are open")

    _register_exception_handlers(app, settings)
    _register_routes(app, settings)
    return app


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(LegiSyncError)
    async def legisync_exception_handler(request: Request, exc: LegiSyncError):
        """Typed failures carry their own HTTP status."""
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies and query parameters are 400s."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid input parameters",
                "detail": [
                    {"loc": list(error.get("loc", ())), "msg": error.get("msg")}
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.app.debug else "An unexpected error occurred"
            }
        )


def _register_routes(app: FastAPI, settings: Settings) -> None:
    from api.v1.endpoints import bills, insights, representatives, sync

    @app.get("/")
    async def root():
        """Root endpoint - API information."""
        return {
            "name": f"{settings.app.app_name} API",
            "version": settings.app.app_version,
            "status": "operational",
            "endpoints": {
                "sync": "/api/v1/sync",
                "sync_logs": "/api/v1/sync/logs",
                "bills": "/api/v1/bills",
                "summarize": "/api/v1/summarize",
                "generate_arguments": "/api/v1/generate-arguments",
                "analyze_impact": "/api/v1/analyze-impact",
                "generate_stages": "/api/v1/generate-stages",
                "lookup_representative": "/api/v1/lookup-representative",
                "chat": "/api/v1/chat",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": "legisync-api"
        }

    app.include_router(sync.router, prefix="/api/v1", tags=["sync"])
    app.include_router(bills.router, prefix="/api/v1", tags=["bills"])
    app.include_router(insights.router, prefix="/api/v1", tags=["insights"])
    app.include_router(representatives.router, prefix="/api/v1", tags=["representatives"])


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().app.debug,
    )
