"""
Two-tier cache for the unfiltered prompt listing.

The primary tier is Redis; the secondary tier is a single in-process
snapshot. Redis availability is a flag that drops on any operational error
and comes back only after a successful PING (the "ready" signal). The PING is
sent at startup and, lazily, by the next request that finds the flag down
once the recheck interval has passed. There is no background retry loop.

Tier operations report failures as ``TierResult`` values instead of raising,
so nothing from this module ever reaches an endpoint as an exception. The
cache is a latency optimization only: a miss or a dead tier costs a store
round-trip, never a wrong answer.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class TierResult:
    """Outcome of one Redis operation: ``ok`` with an optional value, or an error description."""
    ok: bool
    value: Optional[bytes] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[bytes] = None) -> "TierResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "TierResult":
        return cls(ok=False, error=error)


class CacheTier(str, Enum):
    REDIS = "redis"
    MEMORY = "memory"
    NONE = "none"


@dataclass(frozen=True)
class CacheRead:
    """Result of a cache lookup. ``snapshot`` is None on a miss."""
    tier: CacheTier
    snapshot: Optional[bytes] = None

    @property
    def hit(self) -> bool:
        return self.snapshot is not None


MISS = CacheRead(tier=CacheTier.NONE)


class RedisTier:
    """Adapter over an async Redis client that turns operational errors into ``TierResult``."""

    def __init__(self, client: Any, key: str, ttl_seconds: int):
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key: str, ttl_seconds: int, socket_timeout: float) -> "RedisTier":
        client = Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client, key=key, ttl_seconds=ttl_seconds)

    async def _call(self, operation: str, call: Callable[[], Awaitable[Any]]) -> TierResult:
        try:
            value = await call()
        except (RedisError, OSError, asyncio.TimeoutError) as exc:
            return TierResult.failure(f"Redis {operation} failed: {exc}")
        return TierResult.success(value if isinstance(value, bytes) else None)

    async def ping(self) -> TierResult:
        return await self._call("ping", self.client.ping)

    async def get(self) -> TierResult:
        return await self._call("get", lambda: self.client.get(self.key))

    async def set(self, snapshot: bytes) -> TierResult:
        return await self._call("set", lambda: self.client.set(self.key, snapshot, ex=self.ttl_seconds))

    async def delete(self) -> TierResult:
        return await self._call("delete", lambda: self.client.delete(self.key))

    async def close(self) -> None:
        try:
            await self.client.aclose()
        except (RedisError, OSError) as exc:
            logger.warning(f"Failed to close Redis client cleanly: {exc}")


class MemoryTier:
    """A single process-local snapshot with a fixed freshness window."""

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: Optional[bytes] = None
        self._stored_at = 0.0

    def get(self) -> Optional[bytes]:
        if self._snapshot is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._snapshot

    def set(self, snapshot: bytes) -> None:
        self._snapshot = snapshot
        self._stored_at = self._clock()

    def clear(self) -> None:
        self._snapshot = None


class PromptListingCache:
    """
    Cache for the serialized unfiltered listing.

    Constructed once per process and injected into the endpoints. Callers are
    responsible for only using it with unfiltered listing requests.
    """

    def __init__(
        self,
        redis_tier: Optional[RedisTier],
        memory_tier: MemoryTier,
        recheck_interval_seconds: float = 30.0,
        clock: Clock = time.monotonic,
    ):
        self._redis = redis_tier
        self._memory = memory_tier
        self._recheck_interval = recheck_interval_seconds
        self._clock = clock
        self._redis_available = False
        self._last_check_at: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "PromptListingCache":
        redis_tier = None
        if settings.REDIS_URL:
            redis_tier = RedisTier.from_url(
                settings.REDIS_URL,
                key=settings.CACHE_KEY,
                ttl_seconds=settings.CACHE_TTL_SECONDS,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
            )
        else:
            logger.info("REDIS_URL not set - listing cache runs on the in-process tier only")
        return cls(
            redis_tier,
            MemoryTier(settings.MEMORY_CACHE_TTL_SECONDS),
            recheck_interval_seconds=settings.REDIS_RECHECK_INTERVAL_SECONDS,
        )

    def available(self) -> bool:
        """Whether the Redis tier is currently considered usable."""
        return self._redis is not None and self._redis_available

    async def connect(self) -> bool:
        """Send the initial ready check. Returns the resulting availability."""
        if self._redis is not None:
            await self._check_ready()
        return self.available()

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.close()
        self._redis_available = False

    def _mark_unavailable(self, reason: Optional[str]) -> None:
        if self._redis_available:
            logger.warning(f"{reason}; falling back to in-process listing cache")
        else:
            logger.debug(reason)
        self._redis_available = False

    async def _check_ready(self) -> None:
        self._last_check_at = self._clock()
        result = await self._redis.ping()
        if result.ok:
            if not self._redis_available:
                logger.info("Redis ready")
            self._redis_available = True
        else:
            self._mark_unavailable(result.error)

    async def _maybe_recheck(self) -> None:
        if self._redis is None or self._redis_available:
            return
        if self._last_check_at is not None and self._clock() - self._last_check_at < self._recheck_interval:
            return
        await self._check_ready()

    async def get(self) -> CacheRead:
        """
        Look up the listing snapshot.

        Redis is consulted while available; an error there drops the flag and
        the lookup continues with the in-process tier. While Redis is down the
        in-process snapshot is served if it is still fresh.
        """
        await self._maybe_recheck()

        if self.available():
            result = await self._redis.get()
            if result.ok:
                if result.value is not None:
                    return CacheRead(tier=CacheTier.REDIS, snapshot=result.value)
                return MISS
            self._mark_unavailable(result.error)

        snapshot = self._memory.get()
        if snapshot is not None:
            return CacheRead(tier=CacheTier.MEMORY, snapshot=snapshot)
        return MISS

    async def set(self, snapshot: bytes) -> CacheTier:
        """
        Store a freshly queried snapshot.

        Returns:
            CacheTier: Where the snapshot landed. ``NONE`` when the Redis write
            failed; the snapshot is then not cached this round.
        """
        if self.available():
            result = await self._redis.set(snapshot)
            if result.ok:
                return CacheTier.REDIS
            self._mark_unavailable(result.error)
            return CacheTier.NONE

        self._memory.set(snapshot)
        return CacheTier.MEMORY

    async def invalidate(self) -> None:
        """Drop the snapshot from both tiers. Redis failures are logged, never raised."""
        self._memory.clear()
        if self._redis is None:
            return
        result = await self._redis.delete()
        if not result.ok:
            logger.warning(f"Failed to clear Redis listing cache: {result.error}")
            self._mark_unavailable(result.error)
