"""Repository layer for data access.

This layer abstracts external dependencies (Redis, TMDB, Groq) behind
protocol-based interfaces. This enables:
- Swapping the cache backend without touching services
- Unit testing with fake implementations or mocked transports
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from movie_gateway.protocols import CacheStore, CatalogProvider, CompletionProvider

from .cache_factory import create_cache_store
from .groq_completion_provider import GroqCompletionProvider
from .memory_repository import MemoryCacheRepository
from .redis_repository import RedisCacheRepository
from .tmdb_client import TMDBClient

__all__ = [
    "CacheStore",
    "CatalogProvider",
    "CompletionProvider",
    "create_cache_store",
    "GroqCompletionProvider",
    "MemoryCacheRepository",
    "RedisCacheRepository",
    "TMDBClient",
]
