"""HTTP handler for the intelligent search endpoint."""

from loguru import logger

from movie_gateway.dto import IntelligentSearchRequest, IntelligentSearchResponse
from movie_gateway.errors import GatewayError, to_api_error
from movie_gateway.services import IntelligentSearchService

from .common import require_query


class SearchHandler:
    """HTTP handler for POST /api/search/intelligent."""

    def __init__(self, search_service: IntelligentSearchService, default_language: str = "en-US") -> None:
        self._search = search_service
        self._language = default_language

    async def intelligent_search(self, request: IntelligentSearchRequest) -> dict:
        """Handle POST /api/search/intelligent.

        Raises:
            ApiError: 400 MISSING_QUERY, 500 AI_RESPONSE_PARSE_ERROR or
                INTELLIGENT_SEARCH_ERROR
        """
        query = require_query(request.query)
        try:
            result = await self._search.search(query, request.language or self._language)
        except GatewayError as e:
            logger.error(f"INTELLIGENT_SEARCH_ERROR: {e.message}")
            raise to_api_error(e, "INTELLIGENT_SEARCH_ERROR") from e

        return IntelligentSearchResponse(**result).model_dump(by_alias=True)
