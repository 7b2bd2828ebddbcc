"""Cache store selection at startup."""

import redis.asyncio as redis
from loguru import logger

from movie_gateway.config import Settings
from movie_gateway.protocols import CacheStore

from .memory_repository import MemoryCacheRepository
from .redis_repository import RedisCacheRepository


async def create_cache_store(settings: Settings) -> CacheStore:
    """Pick the cache backend for this process.

    Uses Redis when REDIS_URL is configured and answers PING. Any failure to
    reach it degrades to the in-process store instead of failing startup.

    Args:
        settings: Application settings

    Returns:
        A ready-to-use CacheStore
    """
    if not settings.redis_url:
        logger.info("REDIS_URL not set, using in-memory cache")
        return MemoryCacheRepository()

    repository = RedisCacheRepository.create(settings)
    try:
        await repository.client.ping()
    except (redis.RedisError, OSError) as e:
        logger.warning(f"Redis unreachable ({e}), falling back to in-memory cache")
        await repository.close()
        return MemoryCacheRepository()

    logger.info("Connected to Redis cache")
    return repository
