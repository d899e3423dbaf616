import logging
import time
from typing import Callable, Optional

from . import config

logger = logging.getLogger(__name__)


class InMemoryRateLimitClock:
    """Timestamp of the last provider call, kept in this process.

    Uses a monotonic time source by default so wall-clock jumps cannot shorten
    the spacing between calls.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._now = now
        self._last_call_at: Optional[float] = None

    def now(self) -> float:
        return self._now()

    async def last_call_at(self) -> Optional[float]:
        return self._last_call_at

    async def mark(self, ts: float) -> None:
        self._last_call_at = ts


class RedisRateLimitClock:
    """Same contract as InMemoryRateLimitClock, stored under a Redis key.

    Wall-clock (epoch) seconds are used because the value outlives the process.
    Only one dispatcher may use a given key.
    """

    def __init__(self, redis_client, key: str = config.RATE_LIMIT_KEY,
                 now: Callable[[], float] = time.time):
        self._redis = redis_client
        self._key = key
        self._now = now

    def now(self) -> float:
        return self._now()

    async def last_call_at(self) -> Optional[float]:
        raw = await self._redis.get(self._key)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            logger.warning("ignoring unparsable rate-limit timestamp %r at %s", raw, self._key)
            return None

    async def mark(self, ts: float) -> None:
        await self._redis.set(self._key, repr(ts))


def get_rate_limit_clock(backend: str = config.RATE_LIMIT_BACKEND):
    if backend == "memory":
        return InMemoryRateLimitClock()
    if backend == "redis":
        import redis.asyncio as redis

        client = redis.Redis.from_url(config.REDIS_URL, decode_responses=True)
        logger.info("rate-limit clock: redis key=%s", config.RATE_LIMIT_KEY)
        return RedisRateLimitClock(client)
    raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {backend!r}. Valid options: memory, redis")
