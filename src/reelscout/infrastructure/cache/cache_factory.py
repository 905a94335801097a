"""Cache factory - builds the configured adapter."""

from __future__ import annotations

from typing import Literal

import structlog

from reelscout.domain.ports.cache import CachePort
from reelscout.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from reelscout.infrastructure.cache.memory_adapter import MemoryCacheAdapter
from reelscout.infrastructure.cache.redis_adapter import RedisAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["memory", "diskcache", "redis"]

_REDIS_MAX_CONCURRENT = 50


def create_cache(
    backend: CacheBackend = "memory",
    *,
    directory: str = "./.cache/reelscout",
    redis_url: str = "redis://localhost:6379/0",
    ttl_seconds: int = 3600,
    max_concurrent: int = 10,
    reaper_interval: float = 300.0,
) -> CachePort:
    """Create the cache adapter for *backend*.

    Args:
        backend: "memory", "diskcache" (SQLite) or "redis".
        directory: Diskcache path.
        redis_url: Redis connection string.
        ttl_seconds: Default TTL for all backends.
        max_concurrent: Semaphore limit for diskcache.
        reaper_interval: Sweep interval for the memory backend (0 = off).

    Raises:
        ValueError: If `backend` is unknown.
    """
    log.info("cache_factory_create", backend=backend, ttl=ttl_seconds)

    if backend == "memory":
        return MemoryCacheAdapter(
            ttl_seconds=ttl_seconds,
            reaper_interval=reaper_interval,
        )
    if backend == "diskcache":
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_concurrent=max_concurrent,
        )
    if backend == "redis":
        return RedisAdapter(
            url=redis_url,
            ttl_seconds=ttl_seconds,
            max_concurrent=_REDIS_MAX_CONCURRENT,
        )
    raise ValueError(
        f"Unknown cache backend: {backend!r}. Must be 'memory', 'diskcache' or 'redis'."
    )
