# Hey future me - this is THE retry policy for the Lidarr client!
#
# Network blips and 5xx from a busy Lidarr are TEMPORARY - waiting and retrying
# almost always works. 4xx are NOT: a validation error stays a validation error no
# matter how often we resend it, so those are raised immediately.
#
# The backoff is exponential: 1s -> 2s -> 4s (capped at max_delay).
# max_retries=3 means up to 4 attempts in total.
#
# USAGE:
#   result = await execute_with_retry(
#       lambda: limiter.execute(lambda: client.get(url)),
#       RetryPolicy(max_retries=3),
#       description="GET /artist",
#   )
"""Retry utilities for transient external service failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

from spot2lidarr.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry.

    Attributes:
        max_retries: Retries AFTER the first attempt (0 disables retrying)
        base_delay: Delay before the first retry in seconds
        max_delay: Cap for the exponential delay
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the given (0-based) failed attempt."""
        return min(self.base_delay * (2**attempt), self.max_delay)


def is_transient_error(exception: BaseException) -> bool:
    """Check if an exception is worth retrying.

    Hey future me - use this helper to check if you should retry manually!

    Args:
        exception: The exception to check

    Returns:
        True for transport failures (connection refused, timeout, ...) and 5xx
    """
    if isinstance(exception, httpx.TransportError):
        return True
    if isinstance(exception, ExternalServiceError):
        return exception.is_server_error
    return False


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    is_retryable: Callable[[BaseException], bool] = is_transient_error,
    description: str = "",
) -> T:
    """Execute an operation with retry logic.

    Args:
        operation: Async callable to execute (called once per attempt)
        policy: Retry policy (defaults to RetryPolicy())
        is_retryable: Decides whether a raised exception is retried
        description: Label for log messages (e.g. "GET /artist")

    Returns:
        Result of the first successful attempt

    Raises:
        The first non-retryable exception, or the last one once retries run out
    """
    policy = policy or RetryPolicy()
    attempts = policy.max_retries + 1

    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as e:
            if not is_retryable(e) or attempt >= attempts - 1:
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                "Transient failure (attempt %d/%d), retrying in %.1fs: %s %s",
                attempt + 1,
                attempts,
                delay,
                description,
                e,
            )
            await asyncio.sleep(delay)

    # Should not reach here, but just in case
    raise RuntimeError("Unexpected state in execute_with_retry")
