"""Recommendation service.

Builds a prompt for the active request variant, asks the completion model for
five titles and parses them out of its free-text answer. The model is asked
for a comma-separated list but nothing enforces it, so parsing tolerates
numbering, bullets, quotes and an introductory sentence.
"""

import re

from loguru import logger

from movie_gateway.entities import (
    HistoryRecommendation,
    PreferenceRecommendation,
    RatingsRecommendation,
    RecommendationRequest,
)
from movie_gateway.errors import ModelOutputError
from movie_gateway.protocols import CompletionProvider

MAX_INPUT_MOVIES = 10
MAX_RECOMMENDATIONS = 5
TEMPERATURE = 0.7
MAX_TOKENS = 150

SYSTEM_PROMPT = (
    "You are a movie recommendation expert. "
    "Answer ONLY with exactly 5 movie titles separated by commas. "
    "No numbering, no explanations, no extra text."
)

_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")
_INTRO = re.compile(
    r"^[^,\n]*\b(?:here|recommend\w*|suggest\w*|movies|films|titles)\b[^,\n]*:\s*",
    re.IGNORECASE,
)
_MAX_TITLE_LENGTH = 120


def build_prompt(request: RecommendationRequest) -> str:
    """Render the user prompt for a recommendation request variant."""
    if isinstance(request, PreferenceRecommendation):
        return (
            f'Based on these preferences: "{request.preferences.strip()}", '
            "recommend 5 movies. Respond only with the titles separated by commas."
        )

    if isinstance(request, RatingsRecommendation):
        lines = "\n".join(
            f"- {m.title} ({m.genre or 'unknown genre'}): {m.rating}/10"
            for m in request.movies[:MAX_INPUT_MOVIES]
        )
        return (
            "The user rated these movies:\n"
            f"{lines}\n"
            "Recommend 5 different movies they would enjoy. "
            "Respond only with the titles separated by commas."
        )

    if isinstance(request, HistoryRecommendation):
        lines = "\n".join(
            f"- {m.title} ({m.genre or 'unknown genre'})"
            for m in request.movies[:MAX_INPUT_MOVIES]
        )
        return (
            "The user has already watched these movies:\n"
            f"{lines}\n"
            "Recommend 5 movies they have not seen yet. "
            "Respond only with the titles separated by commas."
        )

    raise TypeError(f"Unsupported recommendation request: {type(request).__name__}")


def _clean_title(segment: str) -> str:
    title = _LIST_MARKER.sub("", segment.strip())
    return title.strip().strip("\"'*`“”").rstrip(".").strip()


def parse_titles(text: str, limit: int = MAX_RECOMMENDATIONS) -> list[str]:
    """Extract movie titles from free-text model output.

    Splits on commas (and newlines, for models that answer with a list),
    trims each segment, strips list markers and quotes, drops empty or
    implausibly long segments and keeps at most ``limit`` titles.

    Args:
        text: Raw completion text
        limit: Maximum number of titles

    Returns:
        List of non-empty, trimmed titles (possibly empty)
    """
    body = _INTRO.sub("", text.strip(), count=1)
    titles = []
    for segment in re.split(r"[,\n]", body):
        title = _clean_title(segment)
        if title and len(title) <= _MAX_TITLE_LENGTH:
            titles.append(title)
    return titles[:limit]


class RecommendationService:
    """LLM-backed movie recommendations.

    Example:
        ```python
        service = RecommendationService(completion=GroqCompletionProvider.create(settings))
        titles, model = await service.recommend(
            PreferenceRecommendation(preferences="I like 1980s horror")
        )
        ```
    """

    def __init__(self, completion: CompletionProvider) -> None:
        """Initialize the recommendation service.

        Args:
            completion: Chat-completion provider (required).
        """
        self._completion = completion

    async def recommend(self, request: RecommendationRequest) -> tuple[list[str], str]:
        """Ask the model for recommendations.

        Args:
            request: One recommendation request variant

        Returns:
            Tuple (titles, model_name) with 1 to 5 titles

        Raises:
            ModelOutputError: If no usable title could be parsed
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(request)},
        ]
        text = await self._completion.complete(
            messages,
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )

        titles = parse_titles(text)
        if not titles:
            logger.warning(f"No titles in model output: {text[:200]!r}")
            raise ModelOutputError(
                "NO_RECOMMENDATIONS_GENERATED",
                "The model did not return any usable recommendations",
            )
        return titles, self._completion.model_name
