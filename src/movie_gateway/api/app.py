"""FastAPI application for the movie gateway.

Request pipeline: CORS -> rate limiter -> signature gate -> handler.
"""

from typing import Annotated, Literal

import httpx
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_gateway import __version__
from movie_gateway.api.dependencies import (
    HealthHandlerDep,
    MovieHandlerDep,
    PeopleHandlerDep,
    RecommendationHandlerDep,
    SearchHandlerDep,
    lifespan,
    verify_signature,
)
from movie_gateway.api.rate_limit import (
    RateLimitExceededError,
    create_limiter,
    enforce_rate_limit,
    rate_limit_exceeded_handler,
)
from movie_gateway.config import Settings, get_settings
from movie_gateway.dto import (
    ErrorResponse,
    IntelligentSearchRequest,
    RandomMovieRequest,
    RecommendationRequestDTO,
    SearchRequest,
)
from movie_gateway.errors import ApiError
from movie_gateway.utils import configure_logging

PageQuery = Annotated[int, Query(ge=1, le=500)]
LanguageQuery = Annotated[str | None, Query(max_length=10)]
CountryQuery = Annotated[str | None, Query(min_length=2, max_length=2)]

_HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


# -- exception handlers ------------------------------------------------------


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, code=exc.code, details=exc.details).to_body()
    return JSONResponse(body, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    body = ErrorResponse(error="Invalid request", code="VALIDATION_ERROR", details=details).to_body()
    return JSONResponse(body, status_code=400)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ErrorResponse(
        error=str(exc.detail),
        code=_HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
    ).to_body()
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").to_body()
    return JSONResponse(body, status_code=500)


# -- routes ------------------------------------------------------------------

health_router = APIRouter(tags=["health"])
movies_router = APIRouter(prefix="/movies", tags=["movies"])
people_router = APIRouter(prefix="/people", tags=["people"])
ai_router = APIRouter(tags=["ai"])


@health_router.get("/health")
async def health(handler: HealthHandlerDep) -> dict:
    """Health check endpoint (no signature required)."""
    return await handler.health_check()


@movies_router.get("/now-playing")
async def now_playing(
    handler: MovieHandlerDep,
    page: PageQuery = 1,
    language: LanguageQuery = None,
    country: CountryQuery = None,
) -> dict:
    return await handler.now_playing(page, language, country)


@movies_router.get("/trending")
async def trending(
    handler: MovieHandlerDep,
    page: PageQuery = 1,
    language: LanguageQuery = None,
    time_window: Annotated[Literal["day", "week"], Query(alias="timeWindow")] = "week",
) -> dict:
    return await handler.trending(page, language, time_window)


@movies_router.get("/upcoming")
async def upcoming(
    handler: MovieHandlerDep,
    page: PageQuery = 1,
    language: LanguageQuery = None,
    country: CountryQuery = None,
) -> dict:
    return await handler.upcoming(page, language, country)


@movies_router.get("/discover")
async def discover(
    handler: MovieHandlerDep,
    genres: str | None = None,
    page: PageQuery = 1,
    language: LanguageQuery = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "popularity.desc",
) -> dict:
    """Discover movies by genre ids, e.g. ?genres=27,53."""
    return await handler.discover(genres, page, language, sort_by)


@movies_router.get("/genres")
async def genres(handler: MovieHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.genres(language)


@movies_router.post("/search")
async def search_movies(request: SearchRequest, handler: MovieHandlerDep) -> dict:
    return await handler.search(request)


@movies_router.post("/random")
async def random_movie(request: RandomMovieRequest, handler: MovieHandlerDep) -> dict:
    return await handler.random(request)


@movies_router.get("/{movie_id}")
async def movie_details(movie_id: str, handler: MovieHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.details(movie_id, language)


@movies_router.get("/{movie_id}/credits")
async def movie_credits(movie_id: str, handler: MovieHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.credits(movie_id, language)


@movies_router.get("/{movie_id}/cast")
async def movie_cast(
    movie_id: str,
    handler: MovieHandlerDep,
    language: LanguageQuery = None,
    limit: Annotated[int | None, Query(ge=1, le=200)] = None,
) -> dict:
    return await handler.cast(movie_id, language, limit)


@movies_router.get("/{movie_id}/crew")
async def movie_crew(
    movie_id: str,
    handler: MovieHandlerDep,
    language: LanguageQuery = None,
    department: str | None = None,
) -> dict:
    return await handler.crew(movie_id, language, department)


@movies_router.get("/{movie_id}/providers")
async def movie_providers(movie_id: str, handler: MovieHandlerDep, country: CountryQuery = None) -> dict:
    return await handler.providers(movie_id, country)


@movies_router.get("/{movie_id}/videos")
async def movie_videos(movie_id: str, handler: MovieHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.videos(movie_id, language)


@movies_router.get("/{movie_id}/complete")
async def movie_complete(
    movie_id: str,
    handler: MovieHandlerDep,
    language: LanguageQuery = None,
    country: CountryQuery = None,
) -> dict:
    return await handler.complete(movie_id, language, country)


@people_router.post("/search")
async def search_people(request: SearchRequest, handler: PeopleHandlerDep) -> dict:
    return await handler.search(request)


@people_router.get("/{person_id}")
async def person_details(person_id: str, handler: PeopleHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.details(person_id, language)


@people_router.get("/{person_id}/movies")
async def person_movies(person_id: str, handler: PeopleHandlerDep, language: LanguageQuery = None) -> dict:
    return await handler.movies(person_id, language)


@ai_router.post("/search/intelligent")
async def intelligent_search(request: IntelligentSearchRequest, handler: SearchHandlerDep) -> dict:
    return await handler.intelligent_search(request)


@ai_router.post("/recommendations")
async def recommendations(request: RecommendationRequestDTO, handler: RecommendationHandlerDep) -> dict:
    return await handler.recommend(request)


# -- factory -----------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the environment.
        upstream_transport: Optional httpx transport shared by the TMDB and
            Groq clients (tests inject an httpx.MockTransport).

    Returns:
        The configured application; services are created by the lifespan
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Movie Gateway API",
        description="Signed proxy for TMDB movie data and Groq-powered recommendations",
        version=__version__,
        lifespan=lifespan,
        dependencies=[Depends(enforce_rate_limit)],
    )
    app.state.settings = settings
    app.state.upstream_transport = upstream_transport
    app.state.limiter = create_limiter()

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    origins = list(settings.allowed_origins)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-app-signature"],
    )

    protected = APIRouter(prefix="/api", dependencies=[Depends(verify_signature)])
    protected.include_router(movies_router)
    protected.include_router(people_router)
    protected.include_router(ai_router)

    app.include_router(health_router)
    app.include_router(protected)
    return app


app = create_app()

