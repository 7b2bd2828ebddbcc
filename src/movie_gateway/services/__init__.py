"""Service layer for business logic.

This layer contains the request shaping and upstream orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Upstream / Cache)
"""

from .cache_service import CacheService
from .catalog_service import (
    CatalogService,
    aggregate_filmography,
    directing_credits,
    filter_crew_by_department,
)
from .recommendation_service import RecommendationService, build_prompt, parse_titles
from .search_service import IntelligentSearchService, parse_normalized_query, strip_code_fence

__all__ = [
    "CacheService",
    "CatalogService",
    "IntelligentSearchService",
    "RecommendationService",
    "aggregate_filmography",
    "build_prompt",
    "directing_credits",
    "filter_crew_by_department",
    "parse_normalized_query",
    "parse_titles",
    "strip_code_fence",
]
