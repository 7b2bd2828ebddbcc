"""HTTP handlers for person endpoints."""

from loguru import logger

from movie_gateway.dto import Envelope, SearchRequest
from movie_gateway.errors import GatewayError, to_api_error
from movie_gateway.services import CatalogService

from .common import parse_id, require_query


class PeopleHandler:
    """HTTP handlers for /api/people."""

    def __init__(self, catalog: CatalogService, default_language: str = "en-US") -> None:
        self._catalog = catalog
        self._language = default_language

    async def search(self, request: SearchRequest) -> dict:
        """Handle POST /api/people/search."""
        query = require_query(request.query)
        try:
            payload = await self._catalog.search_people(
                query, request.page, request.language or self._language
            )
        except GatewayError as e:
            logger.error(f"PERSON_SEARCH_ERROR: {e.message}")
            raise to_api_error(e, "PERSON_SEARCH_ERROR") from e

        return Envelope(data=payload["results"], pagination=payload["pagination"]).to_body()

    async def details(self, person_id: str, language: str | None) -> dict:
        """Handle GET /api/people/{id}."""
        person_id_int = parse_id(person_id, "INVALID_PERSON_ID", "person")
        try:
            person = await self._catalog.person_details(person_id_int, language or self._language)
        except GatewayError as e:
            logger.error(f"PERSON_DETAILS_ERROR: {e.message}")
            raise to_api_error(e, "PERSON_DETAILS_ERROR", "PERSON_NOT_FOUND") from e

        return Envelope(data=person).to_body()

    async def movies(self, person_id: str, language: str | None) -> dict:
        """Handle GET /api/people/{id}/movies."""
        person_id_int = parse_id(person_id, "INVALID_PERSON_ID", "person")
        try:
            movies = await self._catalog.person_movies(person_id_int, language or self._language)
        except GatewayError as e:
            logger.error(f"PERSON_MOVIES_ERROR: {e.message}")
            raise to_api_error(e, "PERSON_MOVIES_ERROR", "PERSON_NOT_FOUND") from e

        return Envelope(data=movies).to_body() | {"count": len(movies)}
