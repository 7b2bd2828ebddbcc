"""Error taxonomy.

Domain errors are raised by repositories and services and know nothing about
HTTP. Handlers translate them into ``ApiError`` with ``to_api_error``; the app
renders every ``ApiError`` as ``{success: false, error, code, timestamp}``.
"""

from typing import Any


class GatewayError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(GatewayError):
    """A required upstream credential is missing."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(GatewayError):
    """The upstream reported that the requested resource does not exist."""


class UpstreamError(GatewayError):
    """Timeout, network error or non-404 failure from an upstream."""


class ModelOutputError(GatewayError):
    """The completion model answered with something we cannot interpret."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class ApiError(Exception):
    """HTTP-facing error with a stable machine code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def to_api_error(
    exc: GatewayError,
    failure_code: str,
    not_found_code: str = "NOT_FOUND",
) -> ApiError:
    """Map a domain error onto the HTTP error it surfaces as.

    Args:
        exc: The domain error raised by a service or repository
        failure_code: Per-endpoint code used for generic upstream failures
        not_found_code: Domain-specific code used for upstream 404s

    Returns:
        The ApiError to raise from the handler
    """
    if isinstance(exc, ConfigurationError):
        return ApiError(500, exc.code, "Server configuration error", details=exc.message)
    if isinstance(exc, NotFoundError):
        return ApiError(404, not_found_code, exc.message)
    if isinstance(exc, ModelOutputError):
        return ApiError(500, exc.code, exc.message)
    return ApiError(500, failure_code, "Upstream request failed", details=exc.message)
