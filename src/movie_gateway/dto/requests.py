"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from movie_gateway.entities import (
    HistoryRecommendation,
    PreferenceRecommendation,
    RatedMovie,
    RatingsRecommendation,
    RecommendationRequest,
    WatchedMovie,
)


class SearchRequest(BaseModel):
    """Request DTO for movie and person search.

    An empty query is accepted here and rejected by the handler with
    MISSING_QUERY, so clients get the stable code instead of a generic
    validation error.
    """

    query: str = Field("", description="Free-text search query")
    language: str | None = Field(None, description="TMDB language code, e.g. en-US")
    page: int = Field(1, description="Result page", ge=1, le=500)


class IntelligentSearchRequest(BaseModel):
    """Request DTO for the analyze-then-search endpoint."""

    query: str = Field("", description="Free-text query, possibly misspelled")
    language: str | None = Field(None, description="Language for explanation and results")


class RandomMovieRequest(BaseModel):
    """Request DTO for picking a random movie."""

    model_config = ConfigDict(populate_by_name=True)

    genres: list[int] = Field(default_factory=list, description="TMDB genre ids (any of)")
    language: str | None = None
    year_start: int | None = Field(None, alias="yearStart", ge=1870, le=2100)
    year_end: int | None = Field(None, alias="yearEnd", ge=1870, le=2100)
    min_votes: int | None = Field(None, alias="minVotes", ge=0)
    min_rating: float | None = Field(None, alias="minRating", ge=0, le=10)
    max_rating: float | None = Field(None, alias="maxRating", ge=0, le=10)
    exclude_adult: bool = Field(True, alias="excludeAdult")


class RatedMovieItem(BaseModel):
    title: str = Field(..., min_length=1)
    rating: float = Field(..., ge=0, le=10)
    genre: str = ""


class WatchedMovieItem(BaseModel):
    title: str = Field(..., min_length=1)
    genre: str = ""


class RecommendationRequestDTO(BaseModel):
    """Request DTO for AI recommendations.

    Carries all three possible inputs; ``type`` selects which one is used.
    The handler turns it into exactly one entity variant via ``to_entity``.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["preferences", "ratings", "history", "watched"] = "preferences"
    user_preferences: str | None = Field(None, alias="userPreferences")
    rated_movies: list[RatedMovieItem] = Field(default_factory=list, alias="ratedMovies")
    watched_movies: list[WatchedMovieItem] = Field(default_factory=list, alias="watchedMovies")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def missing_input_code(self) -> str | None:
        """Return the error code for an absent variant input, if any."""
        if self.type == "preferences" and not (self.user_preferences or "").strip():
            return "MISSING_PREFERENCES"
        if self.type == "ratings" and not self.rated_movies:
            return "MISSING_RATED_MOVIES"
        if self.type in ("history", "watched") and not self.watched_movies:
            return "MISSING_WATCHED_MOVIES"
        return None

    def to_entity(self) -> RecommendationRequest:
        """Build the active variant. Call only after ``missing_input_code``."""
        if self.type == "ratings":
            return RatingsRecommendation(
                movies=tuple(
                    RatedMovie(title=m.title.strip(), rating=m.rating, genre=m.genre)
                    for m in self.rated_movies
                )
            )
        if self.type in ("history", "watched"):
            return HistoryRecommendation(
                movies=tuple(
                    WatchedMovie(title=m.title.strip(), genre=m.genre) for m in self.watched_movies
                )
            )
        return PreferenceRecommendation(preferences=(self.user_preferences or "").strip())
