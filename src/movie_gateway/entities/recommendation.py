"""Recommendation request variants.

Exactly one variant is active per request. The handler builds the variant
from the request DTO, so services never see a half-filled request.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RatedMovie:
    title: str
    rating: float
    genre: str = ""


@dataclass(frozen=True)
class WatchedMovie:
    title: str
    genre: str = ""


@dataclass(frozen=True)
class PreferenceRecommendation:
    """Free-text description of what the user likes."""

    preferences: str
    kind: str = "preferences"


@dataclass(frozen=True)
class RatingsRecommendation:
    """Movies the user rated, with their scores."""

    movies: tuple[RatedMovie, ...]
    kind: str = "ratings"


@dataclass(frozen=True)
class HistoryRecommendation:
    """Movies the user has already watched."""

    movies: tuple[WatchedMovie, ...]
    kind: str = "history"


RecommendationRequest = PreferenceRecommendation | RatingsRecommendation | HistoryRecommendation
