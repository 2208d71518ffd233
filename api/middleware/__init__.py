"""
API Middleware Package
======================
Middleware components for FastAPI application.
"""

from .api_key_auth import APIKeyMiddleware

__all__ = ["APIKeyMiddleware"]
