"""Response DTOs for API endpoints.

Every success body carries ``success: true`` and a ``timestamp``; every
error body carries ``success: false``, ``error`` and ``code``.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Pagination(BaseModel):
    page: int = Field(..., ge=0)
    total_pages: int = Field(..., alias="totalPages", ge=0)
    total_results: int = Field(..., alias="totalResults", ge=0)

    model_config = ConfigDict(populate_by_name=True)


class Envelope(BaseModel):
    """Uniform success envelope."""

    success: bool = True
    data: Any = None
    timestamp: str = Field(default_factory=utc_timestamp)
    pagination: Pagination | None = None
    cached: bool | None = None
    message: str | None = None

    def to_body(self) -> dict[str, Any]:
        """Serialize with camelCase pagination, omitting unset optional parts."""
        return self.model_dump(by_alias=True, exclude_none=True) | {"data": self.data}


class IntelligentSearchResponse(BaseModel):
    success: bool = True
    corrected_query: str = Field(..., alias="correctedQuery")
    explanation: str
    type: str
    original_query: str = Field(..., alias="originalQuery")
    person: dict[str, Any] | None = None
    results: list[dict[str, Any]]
    count: int
    timestamp: str = Field(default_factory=utc_timestamp)

    model_config = ConfigDict(populate_by_name=True)


class RecommendationResponse(BaseModel):
    success: bool = True
    data: list[str] = Field(..., max_length=5)
    count: int
    type: str
    model_used: str
    timestamp: str = Field(default_factory=utc_timestamp)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'OK' or 'DEGRADED'")
    timestamp: str = Field(default_factory=utc_timestamp)
    uptime: float = Field(..., description="Seconds since the process started serving", ge=0)
    cache: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    details: Any = None
    retry_after: int | None = Field(None, alias="retryAfter")
    timestamp: str = Field(default_factory=utc_timestamp)

    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
