"""TMDB v3 API client.

Thin async wrapper around the movie database: adds the API key, applies the
configured timeout and translates HTTP failures into domain errors. It does
not reshape payloads; that is the catalog service's job.

API reference: https://developer.themoviedb.org/reference
"""

from typing import Any

import httpx
from loguru import logger

from movie_gateway.config import Settings
from movie_gateway.errors import ConfigurationError, NotFoundError, UpstreamError


class TMDBClient:
    """TMDB implementation of the CatalogProvider protocol.

    Example:
        ```python
        client = TMDBClient.create(settings)
        movie = await client.get("movie/550", {"language": "en-US"})
        ```
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.themoviedb.org/3",
        image_base_url: str = "https://image.tmdb.org/t/p",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the TMDB client.

        Args:
            api_key: TMDB v3 API key. May be None; calls then fail fast.
            base_url: API root.
            image_base_url: Image CDN root.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._image_base_url = image_base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TMDBClient":
        """Factory method to create TMDBClient from settings."""
        return cls(
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            image_base_url=settings.tmdb_image_base_url,
            timeout=settings.tmdb_timeout,
            transport=transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @property
    def image_base_url(self) -> str:
        return self._image_base_url

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform a GET against the TMDB API.

        Args:
            path: Path relative to the API root, e.g. "movie/550"
            params: Query parameters (None values are dropped)

        Returns:
            The decoded JSON body

        Raises:
            ConfigurationError: If TMDB_API_KEY is not configured
            NotFoundError: If TMDB answered 404
            UpstreamError: On timeout, network error or any other HTTP failure
        """
        if not self._api_key:
            raise ConfigurationError("TMDB_API_KEY_MISSING", "TMDB_API_KEY is not configured")

        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["api_key"] = self._api_key

        try:
            response = await self.client.get(f"/{path.lstrip('/')}", params=query)
        except httpx.TimeoutException as e:
            raise UpstreamError(f"TMDB request to {path} timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"TMDB request to {path} failed: {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(f"TMDB resource not found: {path}")

        try:
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"TMDB {path} answered {response.status_code}")
            raise UpstreamError(
                f"TMDB request to {path} failed with status {response.status_code}"
            ) from e
        except ValueError as e:
            raise UpstreamError(f"TMDB returned invalid JSON for {path}") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
