"""
Retry logic with exponential backoff for AI gateway calls.

Source fetches are deliberately not retried within a sync run; a failed
source waits for the next run. The AI gateway, however, answers 429 and
transient 5xx responses often enough that one quick retry is worthwhile.

Responsibility: Retry async callables on transient HTTP failures
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryError(Exception):
    """Raised when all retry attempts are exhausted"""

    def __init__(self, message: str, last_exception: Optional[Exception] = None):
        super().__init__(message)
        self.last_exception = last_exception


def calculate_backoff(
    attempt: int,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    jitter: bool = True
) -> float:
    """
    Delay before retry number ``attempt`` (0-indexed).

    Formula: min(max_delay, base_delay * exponential_base ** attempt),
    scaled into [0.5x, 1.0x] when jitter is on.

    Example:
        >>> calculate_backoff(0, jitter=False)
        1.0
        >>> calculate_backoff(3, jitter=False)
        8.0
    """
    delay = min(base_delay * (exponential_base ** attempt), max_delay)

    if jitter:
        delay = delay * (0.5 + random.random() * 0.5)

    return delay


def is_retryable_error(
    exception: Exception,
    retryable_exceptions: Tuple[Type[Exception], ...] = ()
) -> bool:
    """
    Decide whether an exception is transient.

    Retryable by default:
        - httpx timeouts and connection errors
        - HTTP 429 and 5xx responses
    """
    if retryable_exceptions and isinstance(exception, retryable_exceptions):
        return True

    if isinstance(exception, (httpx.TimeoutException, httpx.ConnectError)):
        return True

    if isinstance(exception, httpx.HTTPStatusError):
        status_code = exception.response.status_code
        return status_code >= 500 or status_code == 429

    return False


async def retry_async(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 2,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    jitter: bool = True,
    retryable_exceptions: Tuple[Type[Exception], ...] = (),
    logger_instance: Optional[logging.Logger] = None
) -> T:
    """
    Await ``func()`` until it succeeds or attempts run out.

    Non-retryable exceptions propagate immediately. When every attempt
    fails with a retryable error, RetryError is raised carrying the last
    exception.

    Args:
        func: Zero-argument coroutine factory
        max_attempts: Total attempts (1 = no retries)
        base_delay: Base delay between retries in seconds
        max_delay: Maximum delay cap in seconds
        jitter: Add randomization to delays
        retryable_exceptions: Additional exception types to retry
        logger_instance: Logger to use (defaults to module logger)
    """
    log = logger_instance or logger
    last_exception: Optional[Exception] = None

    for attempt in range(max_attempts):
        try:
            result = await func()
            if attempt > 0:
                log.info(f"Succeeded after {attempt + 1} attempts")
            return result

        except Exception as e:
            last_exception = e

            if not is_retryable_error(e, retryable_exceptions):
                raise

            if attempt + 1 >= max_attempts:
                log.error(
                    f"All {max_attempts} attempts exhausted. Last error: {e}"
                )
                raise RetryError(
                    f"Failed after {max_attempts} attempts",
                    last_exception=e
                ) from e

            delay = calculate_backoff(
                attempt=attempt,
                base_delay=base_delay,
                max_delay=max_delay,
                jitter=jitter
            )

            log.warning(
                f"Attempt {attempt + 1}/{max_attempts} failed: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            await asyncio.sleep(delay)

    raise RetryError(
        f"Failed after {max_attempts} attempts",
        last_exception=last_exception
    )
