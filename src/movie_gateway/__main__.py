"""Run the gateway with uvicorn: ``python -m movie_gateway``."""

import uvicorn

from movie_gateway.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "movie_gateway.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        timeout_graceful_shutdown=30,
    )


if __name__ == "__main__":
    main()
