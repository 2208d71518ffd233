"""
API key authentication middleware.

Validates the X-API-Key header on protected paths (the sync trigger and sync
log) against the keys configured in APP_API_KEYS.

Responsibility: Request authentication for operator endpoints
"""

import hmac
import logging
from typing import List, Optional

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Middleware for API key authentication."""

    def __init__(
        self,
        app,
        api_keys: List[str],
        protected_paths: Optional[List[str]] = None
    ):
        """
        Initialize API key middleware.

        Args:
            app: FastAPI application
            api_keys: Accepted key values
            protected_paths: Path prefixes requiring a key (default: the sync endpoints)
        """
        super().__init__(app)
        self.api_keys = [key for key in api_keys if key]
        self.protected_paths = protected_paths or ["/api/v1/sync"]

    async def dispatch(self, request: Request, call_next):
        """
        Process request and check API key if needed.

        Args:
            request: HTTP request
            call_next: Next middleware handler

        Returns:
            Response
        """
        # CORS preflight never carries the key
        if request.method == "OPTIONS" or not self._should_protect(request.url.path):
            return await call_next(request)

        if not self.api_keys:
            logger.error(f"No API keys configured; refusing {request.method} {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "Service temporarily unavailable"}
            )

        api_key = request.headers.get("X-API-Key")

        if not api_key:
            logger.warning(f"Missing API key for {request.method} {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Missing X-API-Key header"}
            )

        if not self._is_valid(api_key):
            logger.warning(f"Invalid API key attempted: {api_key[:4]}...")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Invalid API key"}
            )

        return await call_next(request)

    def _should_protect(self, path: str) -> bool:
        """
        Check if path should be protected by API key.

        Args:
            path: Request path

        Returns:
            True if path should be protected
        """
        return any(path.startswith(protected_path) for protected_path in self.protected_paths)

    def _is_valid(self, api_key: str) -> bool:
        candidate = api_key.encode()
        # Check every key so timing does not reveal which one matched
        matches = [hmac.compare_digest(candidate, key.encode()) for key in self.api_keys]
        return any(matches)
