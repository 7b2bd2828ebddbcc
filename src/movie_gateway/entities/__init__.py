"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .intelligent_query import QUERY_KINDS, IntelligentQueryEntity
from .recommendation import (
    HistoryRecommendation,
    PreferenceRecommendation,
    RatedMovie,
    RatingsRecommendation,
    RecommendationRequest,
    WatchedMovie,
)

__all__ = [
    "CacheEntryEntity",
    "IntelligentQueryEntity",
    "QUERY_KINDS",
    "PreferenceRecommendation",
    "RatingsRecommendation",
    "HistoryRecommendation",
    "RecommendationRequest",
    "RatedMovie",
    "WatchedMovie",
]
