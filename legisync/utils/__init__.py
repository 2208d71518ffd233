"""
Utilities package for LegiSync.

Reusable helpers for:
- Rate limiting outbound requests
- Retrying transient AI gateway failures
- Deduplicating records within a run
- UTC timestamps
"""

from .rate_limiter import RateLimiter
from .retry import (
    retry_async,
    calculate_backoff,
    is_retryable_error,
    RetryError,
)
from .dedupe import dedupe_by_key
from .time_utils import utc_now, utc_today

__all__ = [
    "RateLimiter",
    "retry_async",
    "calculate_backoff",
    "is_retryable_error",
    "RetryError",
    "dedupe_by_key",
    "utc_now",
    "utc_today",
]
