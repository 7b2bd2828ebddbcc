"""HTTP handler for the health check."""

import time

from movie_gateway.dto import HealthCheckResponse
from movie_gateway.services import CacheService


class HealthHandler:
    """HTTP handler for GET /health (unauthenticated)."""

    def __init__(self, cache: CacheService, started_at: float | None = None) -> None:
        self._cache = cache
        self._started_at = started_at if started_at is not None else time.monotonic()

    async def health_check(self) -> dict:
        """Handle GET /health requests.

        Returns:
            Dict with status, timestamp, uptime and cache backend stats
        """
        cache_healthy = await self._cache.is_healthy()
        return HealthCheckResponse(
            status="OK" if cache_healthy else "DEGRADED",
            uptime=round(time.monotonic() - self._started_at, 3),
            cache={**self._cache.get_stats(), "healthy": cache_healthy},
        ).model_dump()
