"""In-process read-through cache with injected clock.

One instance per process (created in the lifespan) and passed to
repositories. Entries carry an absolute expiry computed from the injected
clock; expired entries are dropped lazily on the next access, there is no
background eviction.

All access happens on the event loop thread, so the dict needs no lock.
Two concurrent misses on the same key may both fetch; the later write wins.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


class MemoryCache:
    """Dict-backed TTL cache implementing CacheProtocol.

    None is a cacheable value (a lookup that found nothing is remembered for
    its TTL too); get_or_fetch distinguishes it from a miss internally.
    """

    def __init__(self, clock: Clock = time.monotonic, default_ttl: float = 300) -> None:
        """Initialize an empty cache.

        Args:
            clock: Returns the current time in seconds (monotonic in production,
                a fake in tests).
            default_ttl: TTL used when set/get_or_fetch get no explicit ttl.
        """
        self._clock = clock
        self._default_ttl = default_ttl
        self._entries: dict[str, tuple[float, Any]] = {}

    def _lookup(self, key: str) -> tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return False, None
        return True, value

    async def get(self, key: str) -> Any | None:
        hit, value = self._lookup(key)
        logger.debug("Cache %s: %s", "HIT" if hit else "MISS", key)
        return value

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        if ttl <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (self._clock() + ttl, value)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)

    async def delete(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug("Cache DELETE: %s", key)

    async def delete_prefix(self, prefix: str) -> int:
        """Remove all keys starting with prefix (entity-type invalidation)."""
        doomed = [k for k in self._entries if k.startswith(prefix)]
        for k in doomed:
            del self._entries[k]
        if doomed:
            logger.info("Cache INVALIDATE: %s* (%s keys)", prefix, len(doomed))
        return len(doomed)

    async def get_or_fetch(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float | None = None
    ) -> T:
        """Return the live entry for key, else await fetch() and store the result.

        Exceptions raised by fetch propagate and nothing is stored.
        """
        hit, value = self._lookup(key)
        if hit:
            logger.debug("Cache HIT: %s", key)
            return value
        logger.debug("Cache MISS: %s", key)
        value = await fetch()
        await self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        self._entries.clear()
        logger.warning("Cache CLEARED: all keys deleted")

    def stats(self) -> dict[str, int]:
        """Entry counts: total, active (not yet expired) and expired."""
        now = self._clock()
        active = sum(1 for expires_at, _ in self._entries.values() if now < expires_at)
        return {
            "total": len(self._entries),
            "active": active,
            "expired": len(self._entries) - active,
        }
