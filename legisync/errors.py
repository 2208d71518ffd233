"""
Error taxonomy for LegiSync.

Every failure the pipeline or the insight services raise on purpose is a
LegiSyncError subclass. Each class carries the HTTP status the API layer
answers with, so handlers never need to inspect messages.

Responsibility: Typed exceptions shared by adapters, repositories, services and API
"""

from typing import Any, Dict, Optional


class LegiSyncError(Exception):
    """Base class for all expected LegiSync failures."""

    status_code: int = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(LegiSyncError):
    """Malformed caller input. Never retried."""

    status_code = 400


class NotFoundError(LegiSyncError):
    """Requested record or upstream match does not exist."""

    status_code = 404


class UpstreamFetchError(LegiSyncError):
    """External API unreachable, timed out, or answered with a non-2xx status."""

    status_code = 502

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.source = source
        self.upstream_status = upstream_status


class UpstreamParseError(LegiSyncError):
    """Response from a source or AI collaborator did not have the expected shape."""

    status_code = 502


class PersistenceError(LegiSyncError):
    """Write to the bill store or sync log failed."""

    status_code = 500


class ConfigurationError(LegiSyncError):
    """A required credential or endpoint is not configured."""

    status_code = 503


class AIGatewayError(LegiSyncError):
    """AI gateway unreachable, timed out, or rejected the request."""

    status_code = 503
