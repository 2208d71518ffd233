"""
Token bucket rate limiter for outbound source requests.

Congress.gov and Open States both meter API keys per hour, and GovTrack
asks clients to stay gentle. Every adapter owns one limiter and acquires a
token before each page request.

Responsibility: Token bucket rate limiting for adapter requests
"""

import asyncio
import time


class RateLimiter:
    """
    Token bucket limiter.

    Tokens refill continuously at ``rate`` per second up to ``burst``.
    Each request consumes one token; callers wait when the bucket is empty.

    Example:
        limiter = RateLimiter(rate=2.0, burst=1)
        await limiter.acquire()
    """

    def __init__(self, rate: float, burst: int = 1):
        """
        Initialize rate limiter.

        Args:
            rate: Requests per second (e.g., 2.0 = 2 req/sec)
            burst: Bucket capacity
        """
        if rate <= 0:
            raise ValueError("Rate must be positive")
        if burst < 1:
            raise ValueError("Burst must be at least 1")

        self.rate = rate
        self.burst = burst
        self.tokens = float(burst)
        self.last_update = time.monotonic()
        self.lock = asyncio.Lock()

        # Number of acquisitions that had to wait for a token
        self.hits = 0

    async def acquire(self) -> None:
        """Take one token, sleeping until one is available."""
        async with self.lock:
            now = time.monotonic()
            elapsed = now - self.last_update

            self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
            self.last_update = now

            if self.tokens >= 1:
                self.tokens -= 1
                return

            self.hits += 1
            wait_time = (1 - self.tokens) / self.rate
            await asyncio.sleep(wait_time)

            # The token that accrued while sleeping is consumed immediately
            self.tokens = 0
            self.last_update = time.monotonic()

    def reset(self) -> None:
        """Refill the bucket and clear the wait counter."""
        self.tokens = float(self.burst)
        self.last_update = time.monotonic()
        self.hits = 0
