"""
Shared fixtures: an app wired to a fake TMDB/Groq upstream.
"""

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from movie_gateway.api.app import create_app
from movie_gateway.config import Settings

SIGNATURE = "test-signature"
TMDB_HOST = "api.themoviedb.org"
GROQ_HOST = "api.groq.com"


def make_settings(**overrides: Any) -> Settings:
    values = {
        "tmdb_api_key": "tmdb-test-key",
        "groq_api_key": "groq-test-key",
        "groq_model": "llama-3.1-8b-instant",
        "app_signature": SIGNATURE,
        "allowed_origins": ("*",),
        "redis_url": None,
        "cache_ttl": 300,
        "cached_endpoints": ("now-playing", "trending", "upcoming"),
        "rate_limit_window_seconds": 900,
        "rate_limit_max": 1000,
        "random_page_strategy": "top",
        "default_language": "en-US",
        "default_region": "US",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


class FakeUpstream:
    """Records every outbound request and answers from canned data.

    ``tmdb`` maps a TMDB path (without the /3/ prefix) to a JSON body, an
    httpx.Response, or a callable taking the request. Unknown paths get 404.
    ``completions`` is a queue of chat-completion texts returned by Groq;
    an entry may also be an httpx.Response or a callable, as for ``tmdb``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.tmdb: dict[str, Any] = {}
        self.completions: list[Any] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == GROQ_HOST:
            answer = self.completions.pop(0) if self.completions else ""
            if isinstance(answer, httpx.Response):
                return answer
            if callable(answer):
                return answer(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": answer}}]})

        path = request.url.path.removeprefix("/3/")
        answer = self.tmdb.get(path)
        if answer is None:
            return httpx.Response(404, json={"status_message": "The resource could not be found."})
        if isinstance(answer, httpx.Response):
            return answer
        if callable(answer):
            return answer(request)
        return httpx.Response(200, json=answer)

    def calls(self, host: str = TMDB_HOST) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/3/") for r in self.calls()]


def page_of(results: list[dict], page: int = 1, total_pages: int = 1) -> dict:
    return {
        "page": page,
        "results": results,
        "total_pages": total_pages,
        "total_results": len(results) * total_pages,
    }


def movie(movie_id: int, popularity: float = 1.0, **extra: Any) -> dict:
    return {
        "id": movie_id,
        "title": f"Movie {movie_id}",
        "popularity": popularity,
        "poster_path": f"/poster{movie_id}.jpg",
        **extra,
    }


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def make_client(upstream):
    """Factory for clients bound to the fake upstream; closes them afterwards."""
    clients = []

    def _make(settings: Settings | None = None, signed: bool = True) -> TestClient:
        app = create_app(settings or make_settings(), upstream_transport=httpx.MockTransport(upstream))
        client = TestClient(app)
        client.__enter__()
        if signed:
            client.headers.update({"x-app-signature": SIGNATURE})
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings) -> TestClient:
    """Signed client with default test settings."""
    return make_client(settings)
