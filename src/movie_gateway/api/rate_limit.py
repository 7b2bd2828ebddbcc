"""Fixed-window rate limiting.

One application-wide limit, shared by every route and keyed by client
address. It is installed as an app-level dependency, so it is resolved before
router dependencies (and so before the signature gate) on every route.
"""

import math
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import parse
from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address

from movie_gateway.config import Settings
from movie_gateway.dto import ErrorResponse
from movie_gateway.errors import ApiError

GLOBAL_SCOPE = "global"


class RateLimitExceededError(ApiError):
    """The client used up its requests for the current window."""

    def __init__(self, retry_after: int) -> None:
        super().__init__(429, "RATE_LIMIT_EXCEEDED", "Too many requests, please try again later")
        self.retry_after = retry_after


def create_limiter() -> Limiter:
    """Build a limiter owning its own in-memory counters."""
    return Limiter(
        key_func=get_remote_address,
        strategy="fixed-window",
        storage_uri="memory://",
    )


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against the client's window.

    Raises:
        RateLimitExceededError: 429 with the seconds until the window resets
    """
    settings: Settings = request.app.state.settings
    limiter: Limiter = request.app.state.limiter
    item = parse(settings.rate_limit)
    client = get_remote_address(request)

    if limiter.limiter.hit(item, client, GLOBAL_SCOPE):
        return

    reset_at, _remaining = limiter.limiter.get_window_stats(item, client, GLOBAL_SCOPE)
    retry_after = max(1, math.ceil(reset_at - time.time()))
    logger.warning(f"Rate limit exceeded for {client} ({item}), retry in {retry_after}s")
    raise RateLimitExceededError(retry_after)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    """Render a 429 with the seconds remaining in the current window."""
    body = ErrorResponse(
        error=exc.message,
        code=exc.code,
        retryAfter=exc.retry_after,
    ).to_body()
    return JSONResponse(
        body,
        status_code=exc.status_code,
        headers={"Retry-After": str(exc.retry_after)},
    )
