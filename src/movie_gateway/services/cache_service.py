"""Cache service for the cache-aside read path.

This service decides which endpoints are cached, derives cache keys and
coordinates the store with the upstream fetch.
"""

import json
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from loguru import logger

from movie_gateway.config import Settings
from movie_gateway.protocols import CacheStore


class CacheService:
    """Cache-aside orchestration over any CacheStore.

    Only endpoints on the allowlist are cached. Check-then-set is not atomic
    across the await on the upstream fetch: two concurrent misses for the same
    key both fetch and the last writer wins.

    Example:
        ```python
        cache = CacheService(store=MemoryCacheRepository(), cached_endpoints={"trending"})

        payload, cached = await cache.get_or_fetch(
            "trending",
            {"page": 1, "language": "en-US"},
            lambda: catalog.trending(page=1, language="en-US"),
        )
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        cached_endpoints: Iterable[str] = (),
        ttl: int = 300,
        key_prefix: str = "movie_gateway",
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Cache storage backend (required).
            cached_endpoints: Endpoint names eligible for caching.
            ttl: Time-to-live for cache entries in seconds.
            key_prefix: Namespace prepended to every key.
        """
        self._store = store
        self._cached_endpoints = frozenset(cached_endpoints)
        self._ttl = ttl
        self._key_prefix = key_prefix

    @classmethod
    def create(cls, store: CacheStore, settings: Settings) -> "CacheService":
        """Factory method to create CacheService from settings."""
        return cls(
            store=store,
            cached_endpoints=settings.cached_endpoints,
            ttl=settings.cache_ttl,
            key_prefix=settings.cache_key_prefix,
        )

    def build_key(self, endpoint: str, params: dict[str, Any]) -> str:
        """Derive the cache key for an endpoint call.

        Parameters are serialized as canonical JSON (sorted keys, None values
        dropped), so identical requests always share a key and requests that
        differ in any parameter never do.

        Args:
            endpoint: Endpoint name, e.g. "trending"
            params: Every parameter that affects the upstream result

        Returns:
            The cache key
        """
        normalized = {k: v for k, v in params.items() if v is not None}
        canonical = json.dumps(normalized, sort_keys=True, separators=(",", ":"), default=str)
        return f"{self._key_prefix}:{endpoint}:{canonical}"

    def is_cacheable(self, endpoint: str) -> bool:
        return endpoint in self._cached_endpoints

    async def get_or_fetch(
        self,
        endpoint: str,
        params: dict[str, Any],
        fetch: Callable[[], Awaitable[Any]],
    ) -> tuple[Any, bool]:
        """Return a cached payload or fetch and cache it.

        Args:
            endpoint: Endpoint name, checked against the allowlist
            params: Parameters used for key derivation
            fetch: Coroutine factory calling the upstream on a miss

        Returns:
            Tuple (payload, served_from_cache)
        """
        if not self.is_cacheable(endpoint):
            return await fetch(), False

        key = self.build_key(endpoint, params)
        cached = await self._store.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached, True

        logger.debug(f"Cache miss: {key}")
        payload = await fetch()
        await self._store.set(key, payload, self._ttl)
        return payload, False

    async def is_healthy(self) -> bool:
        return await self._store.health_check()

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        stats = self._store.get_stats()
        stats["ttl"] = self._ttl
        stats["cached_endpoints"] = sorted(self._cached_endpoints)
        return stats

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def ttl(self) -> int:
        return self._ttl
