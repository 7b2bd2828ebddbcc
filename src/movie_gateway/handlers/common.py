"""Input checks shared by the HTTP handlers.

They run before any service call, so a rejected request never reaches an
upstream.
"""

from movie_gateway.errors import ApiError


def parse_id(raw: str, code: str, label: str) -> int:
    """Parse a path identifier as a positive integer.

    Args:
        raw: The raw path segment
        code: Error code to use on failure, e.g. "INVALID_MOVIE_ID"
        label: Human name of the resource for the error message

    Returns:
        The parsed identifier

    Raises:
        ApiError: 400 if the identifier is not a positive integer
    """
    try:
        value = int(raw.strip())
    except (AttributeError, ValueError):
        raise ApiError(400, code, f"Invalid {label} ID: {raw!r}") from None
    if value <= 0:
        raise ApiError(400, code, f"Invalid {label} ID: {raw!r}")
    return value


def require_query(query: str | None) -> str:
    """Return the stripped query or reject it as missing."""
    cleaned = (query or "").strip()
    if not cleaned:
        raise ApiError(400, "MISSING_QUERY", "A non-empty search query is required")
    return cleaned


def parse_genres(raw: str | None) -> list[int]:
    """Parse a comma-separated list of genre ids ("28,12")."""
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ApiError(400, "INVALID_GENRES", f"Invalid genre list: {raw!r}") from None
