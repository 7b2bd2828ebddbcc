"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Upstream / Cache)
"""

from .health_handler import HealthHandler
from .movie_handler import MovieHandler
from .people_handler import PeopleHandler
from .recommendation_handler import RecommendationHandler
from .search_handler import SearchHandler

__all__ = [
    "HealthHandler",
    "MovieHandler",
    "PeopleHandler",
    "RecommendationHandler",
    "SearchHandler",
]
