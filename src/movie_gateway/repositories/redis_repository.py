"""Redis implementation of CacheStore.

Values are stored as JSON strings with a native Redis expiry, so Redis itself
guarantees that an expired entry is never returned.
"""

import json
from typing import Any

import redis.asyncio as redis
from loguru import logger

from movie_gateway.config import Settings, get_redis_client


class RedisCacheRepository:
    """Redis implementation using plain string keys with EX expiry.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "movie_gateway") -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Async Redis client instance.
            key_prefix: Prefix used when scanning keys for statistics.
        """
        self._client = redis_client
        self._key_prefix = key_prefix

    @classmethod
    def create(cls, settings: Settings) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository from settings.

        Args:
            settings: Application settings with REDIS_URL configured.

        Returns:
            Configured RedisCacheRepository (not yet connected)
        """
        return cls(redis_client=get_redis_client(settings), key_prefix=settings.cache_key_prefix)

    @property
    def name(self) -> str:
        return "redis"

    async def get(self, key: str) -> Any | None:
        """Read a cached value; an unreachable Redis reads as a miss."""
        try:
            raw = await self._client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._client.set(key, json.dumps(value), ex=ttl)
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        return {
            "backend": self.name,
            "key_prefix": self._key_prefix,
        }

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
