"""
Async Retry — exponential backoff with jitter for outbound lookups.

Only transient network failures are retried; anything else is raised at once.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

import httpx

T = TypeVar("T")


def is_transient_error(e: Exception) -> bool:
    """Timeouts, connection failures and 5xx/429 responses."""
    if isinstance(e, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)):
        return True
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        return code == 429 or code >= 500
    return False


async def async_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    jitter: float = 0.25,
    retry_if: Callable[[Exception], bool] = is_transient_error,
) -> T:
    last_exc: Exception | None = None

    for i in range(max(1, attempts)):
        try:
            return await fn()
        except Exception as e:
            last_exc = e
            if i >= attempts - 1 or not retry_if(e):
                raise

            # exponential backoff + jitter
            delay = min(max_delay, base_delay * (2 ** i))
            delay = delay * (1.0 + random.uniform(-jitter, jitter))
            await asyncio.sleep(max(0.0, delay))

    raise last_exc or RuntimeError("async_retry failed without exception")
