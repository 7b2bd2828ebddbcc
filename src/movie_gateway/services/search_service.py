"""Intelligent search: normalize a free-text query, then dispatch it.

Stage 1 asks the completion model what the user meant (a movie, an actor, a
director or a genre) and for the canonical English spelling. Stage 2 runs the
matching catalog lookup. There is no going back from stage 2 to stage 1 and
no fallback to the raw query when stage 1 fails.
"""

import json
import re
from typing import Any

from loguru import logger

from movie_gateway.entities import QUERY_KINDS, IntelligentQueryEntity
from movie_gateway.errors import ModelOutputError
from movie_gateway.protocols import CompletionProvider

from .catalog_service import (
    FILMOGRAPHY_LIMIT,
    CatalogService,
    aggregate_filmography,
    directing_credits,
    sort_by_popularity,
)

TEMPERATURE = 0.1
MAX_TOKENS = 200

NORMALIZE_PROMPT = """You analyze search queries for a movie app.
The query may be misspelled, phonetic or written in any language.
Decide whether the user is looking for a movie, an actor, a director or a genre,
and give the correct canonical English name.

Answer ONLY with a JSON object, no other text:
{{"type": "movie" | "actor" | "director" | "genre", "corrected": "<canonical name>", "explanation": "<one short sentence in {language}>"}}"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block, if any."""
    return _CODE_FENCE.sub("", text.strip()).strip()


def parse_normalized_query(raw_query: str, text: str) -> IntelligentQueryEntity:
    """Parse the model's JSON answer into an IntelligentQueryEntity.

    Raises:
        ModelOutputError: If the answer is not a JSON object with a
            non-empty "corrected" field
    """
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise ModelOutputError(
            "AI_RESPONSE_PARSE_ERROR",
            f"Could not parse query analysis: {e}",
        ) from e

    if not isinstance(data, dict) or not str(data.get("corrected") or "").strip():
        raise ModelOutputError(
            "AI_RESPONSE_PARSE_ERROR",
            "Query analysis is missing the corrected name",
        )

    kind = str(data.get("type") or "movie").strip().lower()
    if kind not in QUERY_KINDS:
        kind = "movie"

    return IntelligentQueryEntity(
        raw_query=raw_query,
        kind=kind,
        corrected_name=str(data["corrected"]).strip(),
        explanation=str(data.get("explanation") or "").strip(),
    )


class IntelligentSearchService:
    """Two-stage analyze-then-search orchestrator.

    Example:
        ```python
        search = IntelligentSearchService(completion=provider, catalog=catalog)
        result = await search.search("joni dip", language="en-US")
        result["type"], result["correctedQuery"]  # "actor", "Johnny Depp"
        ```
    """

    def __init__(self, completion: CompletionProvider, catalog: CatalogService) -> None:
        self._completion = completion
        self._catalog = catalog

    async def normalize(self, query: str, language: str) -> IntelligentQueryEntity:
        """Stage 1: ask the model what the query refers to."""
        messages = [
            {"role": "system", "content": NORMALIZE_PROMPT.format(language=language)},
            {"role": "user", "content": query},
        ]
        text = await self._completion.complete(
            messages,
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        return parse_normalized_query(query, text)

    async def _person_results(
        self,
        normalized: IntelligentQueryEntity,
        language: str,
    ) -> tuple[list[dict[str, Any]], dict[str, Any] | None]:
        people = await self._catalog.search_people(normalized.corrected_name, 1, language)
        if not people["results"]:
            logger.info(f"No person found for {normalized.corrected_name!r}")
            return [], None

        person = people["results"][0]
        credits = await self._catalog.person_credits(person["id"], language)
        if normalized.kind == "director":
            movies = sort_by_popularity(directing_credits(credits.get("crew") or []))
        else:
            movies = aggregate_filmography(credits.get("cast") or [], credits.get("crew") or [])

        summary = {
            "id": person["id"],
            "name": person.get("name"),
            "profile_url": person.get("profile_url"),
            "known_for_department": person.get("known_for_department"),
        }
        return [self._catalog.shape_movie(m) for m in movies], summary

    async def search(self, query: str, language: str) -> dict[str, Any]:
        """Run both stages.

        Args:
            query: Raw user query (non-empty)
            language: Language for the explanation and catalog results

        Returns:
            Dict with correctedQuery, explanation, type, results, count, person

        Raises:
            ModelOutputError: If stage 1 output cannot be parsed
        """
        normalized = await self.normalize(query, language)
        logger.info(
            f"Intelligent search {query!r} -> {normalized.kind} {normalized.corrected_name!r}"
        )

        person = None
        if normalized.is_person:
            results, person = await self._person_results(normalized, language)
        else:
            movies = await self._catalog.search_movies(normalized.corrected_name, 1, language)
            results = movies["results"]

        results = results[:FILMOGRAPHY_LIMIT]
        return {
            "correctedQuery": normalized.corrected_name,
            "explanation": normalized.explanation,
            "type": normalized.kind,
            "originalQuery": query,
            "person": person,
            "results": results,
            "count": len(results),
        }
