"""Cache storage protocol.

Defines the interface for a key/value store with per-entry TTL used by the
cache-aside layer.

Implementations:
- Redis (networked, shared between server instances)
- In-process map (fallback, lost on restart)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Example:
        ```python
        store: CacheStore = RedisCacheRepository(client)
        store: CacheStore = MemoryCacheRepository()
        ```
    """

    @property
    def name(self) -> str:
        """Short backend name reported by /health."""
        ...

    async def get(self, key: str) -> Any | None:
        """Get a value.

        Args:
            key: The cache key

        Returns:
            The stored value, or None on miss or expired entry
        """
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value, overwriting any previous entry.

        Args:
            key: The cache key
            value: JSON-serializable payload
            ttl: Time-to-live in seconds
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        ...
