"""HTTP handler for AI recommendations."""

from loguru import logger

from movie_gateway.dto import RecommendationRequestDTO, RecommendationResponse
from movie_gateway.errors import ApiError, GatewayError, to_api_error
from movie_gateway.services import RecommendationService

_MISSING_INPUT_MESSAGES = {
    "MISSING_PREFERENCES": "userPreferences is required for type 'preferences'",
    "MISSING_RATED_MOVIES": "ratedMovies must contain at least one movie for type 'ratings'",
    "MISSING_WATCHED_MOVIES": "watchedMovies must contain at least one movie for type 'history'",
}


class RecommendationHandler:
    """HTTP handler for POST /api/recommendations."""

    def __init__(self, recommendation_service: RecommendationService) -> None:
        self._recommendations = recommendation_service

    async def recommend(self, request: RecommendationRequestDTO) -> dict:
        """Handle POST /api/recommendations.

        The request is reduced to exactly one variant before the service is
        called; a variant without data is rejected without contacting the
        completion API.
        """
        missing = request.missing_input_code()
        if missing:
            raise ApiError(400, missing, _MISSING_INPUT_MESSAGES[missing])

        variant = request.to_entity()
        try:
            titles, model = await self._recommendations.recommend(variant)
        except GatewayError as e:
            logger.error(f"RECOMMENDATION_ERROR ({variant.kind}): {e.message}")
            raise to_api_error(e, "RECOMMENDATION_ERROR") from e

        return RecommendationResponse(
            data=titles,
            count=len(titles),
            type=variant.kind,
            model_used=model,
        ).model_dump()
