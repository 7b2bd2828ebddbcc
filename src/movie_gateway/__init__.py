"""Movie Gateway - signed proxy for movie metadata and AI recommendations.

This package provides a layered architecture around two upstreams
(TMDB for movie data, Groq for chat completions):

Layers:
    - protocols: Interface contracts (CacheStore, CatalogProvider, CompletionProvider)
    - repositories: Upstream clients and cache backends
    - services: Request shaping and upstream orchestration
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from movie_gateway.services import CacheService
    from movie_gateway.repositories import MemoryCacheRepository

    cache = CacheService(store=MemoryCacheRepository(), cached_endpoints={"trending"})
    ```

For HTTP API:
    ```python
    from movie_gateway.api.app import create_app
    ```
"""

__version__ = "1.0.0"

from movie_gateway.config import Settings, get_settings
from movie_gateway.dto import IntelligentSearchRequest, RecommendationRequestDTO, SearchRequest
from movie_gateway.entities import CacheEntryEntity, IntelligentQueryEntity
from movie_gateway.errors import ApiError, GatewayError
from movie_gateway.handlers import MovieHandler, PeopleHandler, RecommendationHandler, SearchHandler
from movie_gateway.protocols import CacheStore, CatalogProvider, CompletionProvider
from movie_gateway.repositories import (
    GroqCompletionProvider,
    MemoryCacheRepository,
    RedisCacheRepository,
    TMDBClient,
)
from movie_gateway.services import (
    CacheService,
    CatalogService,
    IntelligentSearchService,
    RecommendationService,
)

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ApiError",
    "GatewayError",
    # Protocols (interfaces)
    "CacheStore",
    "CatalogProvider",
    "CompletionProvider",
    # Services (business logic)
    "CacheService",
    "CatalogService",
    "IntelligentSearchService",
    "RecommendationService",
    # Handlers (HTTP)
    "MovieHandler",
    "PeopleHandler",
    "RecommendationHandler",
    "SearchHandler",
    # Repositories (data access)
    "GroqCompletionProvider",
    "MemoryCacheRepository",
    "RedisCacheRepository",
    "TMDBClient",
    # Entities (domain models)
    "CacheEntryEntity",
    "IntelligentQueryEntity",
    # DTOs (API contracts)
    "IntelligentSearchRequest",
    "RecommendationRequestDTO",
    "SearchRequest",
]
