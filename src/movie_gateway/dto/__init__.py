"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    IntelligentSearchRequest,
    RandomMovieRequest,
    RatedMovieItem,
    RecommendationRequestDTO,
    SearchRequest,
    WatchedMovieItem,
)
from .responses import (
    Envelope,
    ErrorResponse,
    HealthCheckResponse,
    IntelligentSearchResponse,
    Pagination,
    RecommendationResponse,
    utc_timestamp,
)

__all__ = [
    "SearchRequest",
    "IntelligentSearchRequest",
    "RandomMovieRequest",
    "RatedMovieItem",
    "WatchedMovieItem",
    "RecommendationRequestDTO",
    "Envelope",
    "ErrorResponse",
    "HealthCheckResponse",
    "IntelligentSearchResponse",
    "Pagination",
    "RecommendationResponse",
    "utc_timestamp",
]
