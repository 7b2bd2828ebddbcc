"""HTTP handlers for movie endpoints.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like input checks, envelopes and error codes.
"""

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any

from loguru import logger

from movie_gateway.dto import Envelope, RandomMovieRequest, SearchRequest
from movie_gateway.errors import GatewayError, to_api_error
from movie_gateway.services import CacheService, CatalogService

from .common import parse_genres, parse_id, require_query


class MovieHandler:
    """HTTP handlers for /api/movies.

    Listing endpoints go through the cache-aside layer; whether a listing is
    actually cached is decided by the CacheService allowlist.
    """

    def __init__(
        self,
        catalog: CatalogService,
        cache: CacheService,
        default_language: str = "en-US",
        default_region: str = "US",
    ) -> None:
        """Initialize the movie handler.

        Args:
            catalog: Catalog service for TMDB reads (required).
            cache: Cache-aside service for listings (required).
            default_language: Language used when the client sends none.
            default_region: Country used when the client sends none.
        """
        self._catalog = catalog
        self._cache = cache
        self._language = default_language
        self._region = default_region

    def _lang(self, language: str | None) -> str:
        return language or self._language

    def _country(self, country: str | None) -> str:
        return (country or self._region).upper()

    async def _listing(
        self,
        endpoint: str,
        failure_code: str,
        params: dict[str, Any],
        fetch: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        try:
            payload, cached = await self._cache.get_or_fetch(endpoint, params, fetch)
        except GatewayError as e:
            logger.error(f"{failure_code}: {e.message}")
            raise to_api_error(e, failure_code) from e

        return Envelope(
            data=payload["results"],
            pagination=payload["pagination"],
            cached=cached if self._cache.is_cacheable(endpoint) else None,
        ).to_body()

    async def _single(
        self,
        failure_code: str,
        call: Awaitable[Any],
        not_found_code: str = "MOVIE_NOT_FOUND",
    ) -> Any:
        try:
            return await call
        except GatewayError as e:
            logger.error(f"{failure_code}: {e.message}")
            raise to_api_error(e, failure_code, not_found_code) from e

    # -- listings ----------------------------------------------------------

    async def now_playing(self, page: int, language: str | None, country: str | None) -> dict:
        """Handle GET /api/movies/now-playing."""
        params = {"page": page, "language": self._lang(language), "region": self._country(country)}
        return await self._listing(
            "now-playing",
            "NOW_PLAYING_ERROR",
            params,
            lambda: self._catalog.now_playing(**params),
        )

    async def trending(self, page: int, language: str | None, time_window: str) -> dict:
        """Handle GET /api/movies/trending."""
        params = {"page": page, "language": self._lang(language), "time_window": time_window}
        return await self._listing(
            "trending",
            "TRENDING_ERROR",
            params,
            lambda: self._catalog.trending(**params),
        )

    async def upcoming(self, page: int, language: str | None, country: str | None) -> dict:
        """Handle GET /api/movies/upcoming.

        The window starts today, so the date is part of the cache key.
        """
        today = date.today()
        params = {"page": page, "language": self._lang(language), "region": self._country(country)}
        return await self._listing(
            "upcoming",
            "UPCOMING_ERROR",
            {**params, "today": today.isoformat()},
            lambda: self._catalog.upcoming(**params, today=today),
        )

    async def discover(
        self,
        genres: str | None,
        page: int,
        language: str | None,
        sort_by: str,
    ) -> dict:
        """Handle GET /api/movies/discover."""
        params = {
            "genres": parse_genres(genres),
            "page": page,
            "language": self._lang(language),
            "sort_by": sort_by,
        }
        return await self._listing(
            "discover",
            "DISCOVER_ERROR",
            params,
            lambda: self._catalog.discover(**params),
        )

    async def genres(self, language: str | None) -> dict:
        """Handle GET /api/movies/genres."""
        genres = await self._single("GENRES_ERROR", self._catalog.genres(self._lang(language)))
        return Envelope(data=genres).to_body()

    async def search(self, request: SearchRequest) -> dict:
        """Handle POST /api/movies/search."""
        query = require_query(request.query)
        params = {"query": query, "page": request.page, "language": self._lang(request.language)}
        return await self._listing(
            "search",
            "SEARCH_ERROR",
            params,
            lambda: self._catalog.search_movies(**params),
        )

    async def random(self, request: RandomMovieRequest) -> dict:
        """Handle POST /api/movies/random."""
        movie = await self._single(
            "RANDOM_MOVIE_ERROR",
            self._catalog.random_movie(
                language=self._lang(request.language),
                genres=request.genres,
                year_start=request.year_start,
                year_end=request.year_end,
                min_votes=request.min_votes,
                min_rating=request.min_rating,
                max_rating=request.max_rating,
                exclude_adult=request.exclude_adult,
            ),
        )
        if movie is None:
            return Envelope(data=None, message="No movies found matching the criteria").to_body()
        return Envelope(data=movie).to_body()

    # -- single movie ------------------------------------------------------

    async def details(self, movie_id: str, language: str | None) -> dict:
        """Handle GET /api/movies/{id}."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        movie = await self._single(
            "MOVIE_DETAILS_ERROR",
            self._catalog.movie_details(movie_id_int, self._lang(language)),
        )
        return Envelope(data=movie).to_body()

    async def credits(self, movie_id: str, language: str | None) -> dict:
        """Handle GET /api/movies/{id}/credits."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        credits = await self._single(
            "MOVIE_CREDITS_ERROR",
            self._catalog.movie_credits(movie_id_int, self._lang(language)),
        )
        return Envelope(data=credits).to_body()

    async def cast(self, movie_id: str, language: str | None, limit: int | None) -> dict:
        """Handle GET /api/movies/{id}/cast."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        cast = await self._single(
            "MOVIE_CREDITS_ERROR",
            self._catalog.movie_cast(movie_id_int, self._lang(language), limit),
        )
        return Envelope(data=cast).to_body() | {"count": len(cast)}

    async def crew(self, movie_id: str, language: str | None, department: str | None) -> dict:
        """Handle GET /api/movies/{id}/crew."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        crew = await self._single(
            "MOVIE_CREDITS_ERROR",
            self._catalog.movie_crew(movie_id_int, self._lang(language), department),
        )
        return Envelope(data=crew).to_body() | {"count": len(crew)}

    async def providers(self, movie_id: str, country: str | None) -> dict:
        """Handle GET /api/movies/{id}/providers."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        providers = await self._single(
            "MOVIE_PROVIDERS_ERROR",
            self._catalog.movie_providers(movie_id_int, self._country(country)),
        )
        return Envelope(data=providers, message=providers.get("message")).to_body()

    async def videos(self, movie_id: str, language: str | None) -> dict:
        """Handle GET /api/movies/{id}/videos."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        videos = await self._single(
            "MOVIE_VIDEOS_ERROR",
            self._catalog.movie_videos(movie_id_int, self._lang(language)),
        )
        return Envelope(data=videos).to_body() | {"count": len(videos)}

    async def complete(self, movie_id: str, language: str | None, country: str | None) -> dict:
        """Handle GET /api/movies/{id}/complete."""
        movie_id_int = parse_id(movie_id, "INVALID_MOVIE_ID", "movie")
        movie = await self._single(
            "MOVIE_DETAILS_ERROR",
            self._catalog.movie_complete(movie_id_int, self._lang(language), self._country(country)),
        )
        return Envelope(data=movie).to_body()
