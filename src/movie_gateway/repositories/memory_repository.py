"""In-process implementation of CacheStore.

Used when no Redis is configured or Redis is unreachable at startup. Entries
live in a dict owned by this object, are lost on restart and are not shared
between server instances.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

from movie_gateway.entities import CacheEntryEntity


class MemoryCacheRepository:
    """Dict-backed cache with timer-based eviction.

    All mutation happens on the event loop thread, so no locking is needed.
    Expiry is checked on every read as well, so a late or skipped timer can
    never surface a stale value.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the in-memory store.

        Args:
            clock: Monotonic time source in seconds (injectable for tests).
        """
        self._clock = clock
        self._entries: dict[str, CacheEntryEntity] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    @property
    def name(self) -> str:
        return "memory"

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._evict(key, entry.expires_at)
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        expires_at = self._clock() + ttl
        self._entries[key] = CacheEntryEntity(key=key, value=value, expires_at=expires_at)

        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(ttl, self._evict, key, expires_at)

    def _evict(self, key: str, expires_at: float) -> None:
        # Only remove the entry this timer was scheduled for, not a newer overwrite.
        entry = self._entries.get(key)
        if entry is not None and entry.expires_at == expires_at:
            del self._entries[key]
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()

    async def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        return {
            "backend": self.name,
            "total_entries": len(self._entries),
        }

    async def close(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
