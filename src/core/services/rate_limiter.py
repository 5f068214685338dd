"""Shared token bucket for outbound ownership lookups.

The bucket is the only mutable state shared by every domain task. Callers
only ever `await acquire()`; the refill bookkeeping stays behind an
`asyncio.Lock`, which also queues waiters in FIFO order so no task starves.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

from loguru import logger

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class TokenBucket:
    """Token bucket with a fixed refill rate (tokens per second).

    With `capacity=1` consecutive acquisitions are spaced `1 / rate` apart;
    the first one is served immediately.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._rate = float(rate)
        self._capacity = float(capacity)
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._updated = clock()
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(self._capacity, self._tokens + elapsed * self._rate)
        self._updated = now

    async def acquire(self) -> None:
        """Block until one token is available, then consume it."""

        async with self._lock:
            self._refill()
            if self._tokens < 1.0:
                wait = (1.0 - self._tokens) / self._rate
                logger.debug(f"Rate limit: waiting {wait:.3f}s for a token")
                await self._sleep(wait)
                self._refill()
            # Float drift after the sleep can leave the bucket a hair under 1.
            self._tokens = max(0.0, self._tokens - 1.0)


def build_rate_limiter(requests_per_second: float) -> TokenBucket | None:
    """Return the shared limiter, or `None` when rate limiting is disabled."""

    if requests_per_second <= 0:
        return None
    return TokenBucket(requests_per_second, capacity=1)
