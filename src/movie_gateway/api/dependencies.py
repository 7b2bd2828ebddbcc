"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import hmac
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, Request
from loguru import logger

from movie_gateway.config import Settings
from movie_gateway.errors import ApiError
from movie_gateway.handlers import (
    HealthHandler,
    MovieHandler,
    PeopleHandler,
    RecommendationHandler,
    SearchHandler,
)
from movie_gateway.repositories import GroqCompletionProvider, TMDBClient, create_cache_store
from movie_gateway.services import (
    CacheService,
    CatalogService,
    IntelligentSearchService,
    RecommendationService,
)

SIGNATURE_HEADER = "x-app-signature"

_STATE_KEYS = (
    "movie_handler",
    "people_handler",
    "search_handler",
    "recommendation_handler",
    "health_handler",
    "cache_service",
    "cache_store",
    "catalog_client",
    "completion_provider",
)


def _from_state(request: Request, name: str) -> Any:
    """Fetch a lifespan-created object from app.state.

    Raises:
        RuntimeError: If the lifespan did not run
    """
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized. Check lifespan setup.")
    return value


def get_movie_handler(request: Request) -> MovieHandler:
    return _from_state(request, "movie_handler")


def get_people_handler(request: Request) -> PeopleHandler:
    return _from_state(request, "people_handler")


def get_search_handler(request: Request) -> SearchHandler:
    return _from_state(request, "search_handler")


def get_recommendation_handler(request: Request) -> RecommendationHandler:
    return _from_state(request, "recommendation_handler")


def get_health_handler(request: Request) -> HealthHandler:
    return _from_state(request, "health_handler")


def verify_signature(
    request: Request,
    x_app_signature: Annotated[str | None, Header()] = None,
) -> None:
    """Shared-secret gate for every /api route.

    Fails closed: a missing header, a mismatch, or a server without a
    configured secret all reject the request before any handler runs.

    Raises:
        ApiError: 401 INVALID_SIGNATURE
    """
    settings: Settings = request.app.state.settings
    expected = settings.app_signature
    if (
        not expected
        or x_app_signature is None
        or not hmac.compare_digest(x_app_signature.encode(), expected.encode())
    ):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected request with invalid signature from {client}: {request.url.path}")
        raise ApiError(401, "INVALID_SIGNATURE", "Invalid or missing app signature")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Repositories (cache store, TMDB client, Groq provider)
    2. Services (cache-aside, catalog, recommendations, intelligent search)
    3. Handlers (HTTP endpoints)

    An ``app.state.upstream_transport`` set before startup is shared by both
    upstream clients (tests use it to mock TMDB and Groq).

    Cleanup:
        Closes the HTTP clients and the cache store, then removes everything
        from app.state
    """
    settings: Settings = app.state.settings
    transport = getattr(app.state, "upstream_transport", None)

    cache_store = await create_cache_store(settings)
    catalog_client = TMDBClient.create(settings, transport=transport)
    completion_provider = GroqCompletionProvider.create(settings, transport=transport)

    cache_service = CacheService.create(cache_store, settings)
    catalog = CatalogService(
        provider=catalog_client,
        random_page_strategy=settings.random_page_strategy,
    )
    recommendations = RecommendationService(completion=completion_provider)
    search = IntelligentSearchService(completion=completion_provider, catalog=catalog)

    app.state.cache_store = cache_store
    app.state.catalog_client = catalog_client
    app.state.completion_provider = completion_provider
    app.state.cache_service = cache_service
    app.state.movie_handler = MovieHandler(
        catalog=catalog,
        cache=cache_service,
        default_language=settings.default_language,
        default_region=settings.default_region,
    )
    app.state.people_handler = PeopleHandler(catalog=catalog, default_language=settings.default_language)
    app.state.search_handler = SearchHandler(search_service=search, default_language=settings.default_language)
    app.state.recommendation_handler = RecommendationHandler(recommendation_service=recommendations)
    app.state.health_handler = HealthHandler(cache=cache_service)

    logger.info(f"Cache backend: {cache_store.name} (ttl={settings.cache_ttl}s)")
    logger.info(f"Cached endpoints: {', '.join(settings.cached_endpoints) or 'none'}")
    logger.info(f"Rate limit: {settings.rate_limit}")
    if not settings.tmdb_api_key:
        logger.warning("TMDB_API_KEY is not set; catalog endpoints will fail")
    if not settings.groq_api_key:
        logger.warning("GROQ_API_KEY is not set; AI endpoints will fail")
    if not settings.app_signature:
        logger.warning("APP_SIGNATURE is not set; every /api request will be rejected")

    yield

    await catalog_client.close()
    await completion_provider.close()
    await cache_store.close()
    for key in _STATE_KEYS:
        delattr(app.state, key)
    logger.info("Movie gateway shut down")


# Type aliases for cleaner dependency injection
MovieHandlerDep = Annotated[MovieHandler, Depends(get_movie_handler)]
PeopleHandlerDep = Annotated[PeopleHandler, Depends(get_people_handler)]
SearchHandlerDep = Annotated[SearchHandler, Depends(get_search_handler)]
RecommendationHandlerDep = Annotated[RecommendationHandler, Depends(get_recommendation_handler)]
HealthHandlerDep = Annotated[HealthHandler, Depends(get_health_handler)]
