"""Backoff retries for calls to external login sources.

Only transport failures are retried. An HTTP response of any status is
an answer from the provider and is returned as is.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

# One initial try plus one retry.
DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds
DEFAULT_MAX_DELAY = 2.0  # seconds

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (httpx.RequestError,)


def _calculate_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> float:
    """Delay before retrying after zero-indexed ``attempt``, capped."""
    return min(base_delay * (2**attempt), max_delay)


async def with_retry[T](
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> T:
    """Await ``fn()`` until it succeeds or ``attempts`` calls have failed.

    At least one call is made. Cancellation is never retried.

    Raises:
        The error of the final attempt
    """
    attempts = max(attempts, 1)

    for attempt in range(attempts - 1):
        try:
            return await fn()
        except exceptions as e:
            delay = _calculate_delay(attempt, base_delay, max_delay)
            logger.warning(
                "Provider call failed (%s), attempt %d/%d, retrying in %.2fs",
                type(e).__name__,
                attempt + 1,
                attempts,
                delay,
                extra={"error_type": type(e).__name__},
            )
            await asyncio.sleep(delay)

    return await fn()
