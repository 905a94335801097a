"""In-memory cache adapter with lazy expiry and an optional background reaper."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

log = structlog.get_logger(__name__)


@dataclass
class _Entry:
    value: Any
    created_at: float
    ttl: int

    def expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class MemoryCacheAdapter:
    """Process-local dict cache.

    - Expired entries are evicted lazily on ``get``/``exists``.
    - An optional reaper task sweeps expired entries every
      ``reaper_interval`` seconds; correctness never depends on it.
    - ``clock`` is injectable so expiry can be tested without sleeping.
    - Single event loop, no locks: concurrent ``set`` on one key is
      last-writer-wins.

    Args:
        ttl_seconds: Default TTL for `set()` without explicit value.
        reaper_interval: Seconds between sweeps. ``0`` disables the reaper.
        clock: Monotonic time source (seconds).
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        reaper_interval: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self._reaper_interval = reaper_interval
        self._clock = clock
        self._store: dict[str, _Entry] = {}
        self._reaper: asyncio.Task[None] | None = None

        log.info(
            "memory_cache_init",
            default_ttl=ttl_seconds,
            reaper_interval=reaper_interval,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> MemoryCacheAdapter:
        """Start the reaper (if enabled)."""
        if self._reaper is None and self._reaper_interval > 0:
            self._reaper = asyncio.create_task(self._reap_forever())
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._reaper is not None:
            self._reaper.cancel()
            try:
                await self._reaper
            except asyncio.CancelledError:
                pass
            self._reaper = None
            log.info("memory_cache_reaper_stopped")

    # --- CachePort implementation ---
    async def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            log.debug("cache_get", key=key, hit=False)
            return None
        if entry.expired(self._clock()):
            del self._store[key]
            log.debug("cache_expired", key=key)
            return None
        log.debug("cache_get", key=key, hit=True)
        return entry.value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire_time = ttl if ttl is not None else self.default_ttl
        self._store[key] = _Entry(value=value, created_at=self._clock(), ttl=expire_time)
        log.debug("cache_set", key=key, ttl=expire_time)

    async def delete(self, key: str) -> bool:
        deleted = self._store.pop(key, None) is not None
        log.debug("cache_delete", key=key, deleted=deleted)
        return deleted

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def clear(self) -> None:
        self._store.clear()
        log.warning("cache_cleared", backend="memory")

    # --- Reaper ---
    def sweep(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [k for k, e in self._store.items() if e.expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)

    async def _reap_forever(self) -> None:
        while True:
            await asyncio.sleep(self._reaper_interval)
            removed = self.sweep()
            if removed:
                log.debug("memory_cache_swept", removed=removed, remaining=len(self))
