"""Movie catalog protocol.

Any read-only client for the movie database that returns decoded JSON.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CatalogProvider(Protocol):
    """Protocol for the movie-database upstream."""

    @property
    def image_base_url(self) -> str:
        """Base URL used to build poster/backdrop/profile links."""
        ...

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform a GET against the catalog.

        Args:
            path: Path relative to the API root, e.g. "movie/550"
            params: Query parameters (None values are dropped)

        Returns:
            The decoded JSON body

        Raises:
            ConfigurationError: If the API key is missing
            NotFoundError: If the upstream answered 404
            UpstreamError: On any other failure
        """
        ...

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        ...
