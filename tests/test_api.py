"""
Tests for the gateway's HTTP surface: health, signature gate, error envelopes.
"""

import httpx
import pytest

from tests.conftest import GROQ_HOST, make_settings, movie

PROTECTED_ROUTES = [
    ("get", "/api/movies/now-playing", None),
    ("get", "/api/movies/trending", None),
    ("get", "/api/movies/upcoming", None),
    ("get", "/api/movies/550", None),
    ("get", "/api/movies/550/credits", None),
    ("get", "/api/movies/550/providers", None),
    ("post", "/api/movies/search", {"query": "alien"}),
    ("post", "/api/movies/random", {}),
    ("post", "/api/people/search", {"query": "depp"}),
    ("get", "/api/people/85", None),
    ("get", "/api/people/85/movies", None),
    ("post", "/api/search/intelligent", {"query": "joni dip"}),
    ("post", "/api/recommendations", {"userPreferences": "horror", "type": "preferences"}),
]


def _call(client, method, path, body, **kwargs):
    if method == "get":
        return client.get(path, **kwargs)
    return client.post(path, json=body, **kwargs)


def test_health(make_client):
    """Health check works without a signature."""
    client = make_client(signed=False)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert "timestamp" in data
    assert data["uptime"] >= 0
    assert data["cache"]["backend"] == "memory"


@pytest.mark.parametrize("method,path,body", PROTECTED_ROUTES)
def test_missing_signature_is_rejected_without_upstream_calls(make_client, upstream, method, path, body):
    client = make_client(signed=False)
    response = _call(client, method, path, body)

    assert response.status_code == 401
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INVALID_SIGNATURE"
    assert "error" in data
    assert upstream.requests == []


@pytest.mark.parametrize("method,path,body", PROTECTED_ROUTES)
def test_wrong_signature_is_rejected_without_upstream_calls(make_client, upstream, method, path, body):
    client = make_client(signed=False)
    response = _call(client, method, path, body, headers={"x-app-signature": "not-the-secret"})

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_SIGNATURE"
    assert upstream.requests == []


def test_unconfigured_secret_fails_closed(make_client, upstream):
    client = make_client(make_settings(app_signature=None), signed=False)
    response = client.get("/api/movies/550", headers={"x-app-signature": ""})

    assert response.status_code == 401
    assert upstream.requests == []


def test_malformed_movie_id(client, upstream):
    response = client.get("/api/movies/abc")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_MOVIE_ID"
    assert upstream.requests == []


@pytest.mark.parametrize("path", ["/api/movies/abc/credits", "/api/movies/-3/cast", "/api/movies/1.5/videos"])
def test_malformed_movie_id_on_sub_resources(client, upstream, path):
    response = client.get(path)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_MOVIE_ID"
    assert upstream.requests == []


def test_malformed_person_id(client, upstream):
    response = client.get("/api/people/xyz/movies")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PERSON_ID"
    assert upstream.requests == []


def test_movie_details(client, upstream):
    upstream.tmdb["movie/550"] = movie(550, title="Fight Club", backdrop_path="/bd.jpg")

    response = client.get("/api/movies/550", params={"language": "es-ES"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "timestamp" in data
    assert data["data"]["title"] == "Fight Club"
    assert data["data"]["poster_url"] == "https://image.tmdb.org/t/p/w500/poster550.jpg"
    assert data["data"]["backdrop_url"] == "https://image.tmdb.org/t/p/w1280/bd.jpg"

    sent = upstream.calls()[0]
    assert sent.url.params["api_key"] == "tmdb-test-key"
    assert sent.url.params["language"] == "es-ES"


def test_movie_not_found(client):
    response = client.get("/api/movies/999999")

    assert response.status_code == 404
    assert response.json()["code"] == "MOVIE_NOT_FOUND"


def test_person_not_found(client):
    response = client.get("/api/people/999999")

    assert response.status_code == 404
    assert response.json()["code"] == "PERSON_NOT_FOUND"


def test_upstream_failure_maps_to_endpoint_code(client, upstream):
    upstream.tmdb["movie/550"] = httpx.Response(503, json={"status_message": "down"})

    response = client.get("/api/movies/550")

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "MOVIE_DETAILS_ERROR"
    assert "503" in data["details"]


def test_upstream_timeout_maps_to_endpoint_code(client, upstream):
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream.tmdb["trending/movie/week"] = timeout

    response = client.get("/api/movies/trending")

    assert response.status_code == 500
    assert response.json()["code"] == "TRENDING_ERROR"


def test_missing_tmdb_key(make_client, upstream):
    client = make_client(make_settings(tmdb_api_key=None))

    response = client.get("/api/movies/550")

    assert response.status_code == 500
    assert response.json()["code"] == "TMDB_API_KEY_MISSING"
    assert upstream.requests == []


def test_missing_groq_key(make_client, upstream):
    client = make_client(make_settings(groq_api_key=None))

    response = client.post("/api/recommendations", json={"userPreferences": "horror"})

    assert response.status_code == 500
    assert response.json()["code"] == "GROQ_API_KEY_MISSING"
    assert upstream.calls(GROQ_HOST) == []


def test_invalid_body_is_a_validation_error(client, upstream):
    response = client.post("/api/movies/search", json={"query": "alien", "page": 0})

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert upstream.requests == []


def test_empty_search_query(client, upstream):
    response = client.post("/api/movies/search", json={"query": "   "})

    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_QUERY"
    assert upstream.requests == []


def test_unknown_route(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_server_starts_only_from_package_main(monkeypatch):
    import movie_gateway.__main__ as entry
    import movie_gateway.api.app as app_module

    runs = []
    monkeypatch.setattr(entry.uvicorn, "run", lambda target, **kwargs: runs.append(target))

    entry.main()

    assert runs == ["movie_gateway.api.app:app"]
    assert not hasattr(app_module, "uvicorn")
