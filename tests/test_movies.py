"""
Tests for the movie endpoints: listings, caching, upcoming window, sub-resources.
"""

from datetime import date, timedelta

from tests.conftest import make_settings, movie, page_of


def test_now_playing_envelope(client, upstream):
    upstream.tmdb["movie/now_playing"] = page_of([movie(1), movie(2)], page=2, total_pages=7)

    response = client.get("/api/movies/now-playing", params={"page": 2, "country": "es"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert [m["id"] for m in data["data"]] == [1, 2]
    assert data["pagination"] == {"page": 2, "totalPages": 7, "totalResults": 14}
    assert data["cached"] is False

    params = upstream.calls()[0].url.params
    assert params["page"] == "2"
    assert params["region"] == "ES"
    assert params["language"] == "en-US"


def test_trending_is_served_from_cache_on_second_call(client, upstream):
    upstream.tmdb["trending/movie/week"] = page_of([movie(10), movie(11)])

    first = client.get("/api/movies/trending", params={"page": 1})
    second = client.get("/api/movies/trending", params={"page": 1})

    assert first.status_code == second.status_code == 200
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert second.json()["data"] == first.json()["data"]
    assert len(upstream.calls()) == 1


def test_cache_distinguishes_parameters(client, upstream):
    upstream.tmdb["trending/movie/week"] = page_of([movie(10)])

    client.get("/api/movies/trending", params={"page": 1})
    client.get("/api/movies/trending", params={"page": 2})
    client.get("/api/movies/trending", params={"page": 1, "language": "fr-FR"})
    client.get("/api/movies/trending", params={"page": 1})

    assert len(upstream.calls()) == 3


def test_trending_time_window(client, upstream):
    upstream.tmdb["trending/movie/day"] = page_of([movie(3)])

    response = client.get("/api/movies/trending", params={"timeWindow": "day"})

    assert response.status_code == 200
    assert upstream.paths() == ["trending/movie/day"]


def test_endpoints_outside_allowlist_are_not_cached(make_client, upstream):
    client = make_client(make_settings(cached_endpoints=("now-playing",)))
    upstream.tmdb["trending/movie/week"] = page_of([movie(10)])

    first = client.get("/api/movies/trending")
    second = client.get("/api/movies/trending")

    assert "cached" not in first.json()
    assert "cached" not in second.json()
    assert len(upstream.calls()) == 2


def test_upcoming_uses_theatrical_window(client, upstream):
    today = date.today()
    inside = (today + timedelta(days=30)).isoformat()
    too_late = (today + timedelta(days=200)).isoformat()
    past = (today - timedelta(days=3)).isoformat()
    upstream.tmdb["discover/movie"] = page_of(
        [
            movie(1, popularity=90, release_date=inside),
            movie(2, popularity=80, release_date=too_late),
            movie(3, popularity=70, release_date=past),
            movie(4, popularity=60, release_date=today.isoformat()),
        ]
    )

    response = client.get("/api/movies/upcoming")

    assert response.status_code == 200
    data = response.json()
    assert [m["id"] for m in data["data"]] == [1, 4]
    assert data["pagination"]["totalResults"] == 2
    for item in data["data"]:
        assert today.isoformat() <= item["release_date"] <= (today + timedelta(days=120)).isoformat()

    params = upstream.calls()[0].url.params
    assert params["with_release_type"] == "2|3"
    assert params["primary_release_date.gte"] == today.isoformat()
    assert params["primary_release_date.lte"] == (today + timedelta(days=120)).isoformat()
    assert params["sort_by"] == "popularity.desc"
    assert params["region"] == "US"


def test_upcoming_cache_follows_the_date(client, upstream, monkeypatch):
    current = [date(2026, 10, 19)]

    class FrozenDate(date):
        @classmethod
        def today(cls):
            return current[0]

    monkeypatch.setattr("movie_gateway.handlers.movie_handler.date", FrozenDate)
    upstream.tmdb["discover/movie"] = page_of(
        [
            movie(1, popularity=90, release_date="2026-10-19"),
            movie(2, popularity=80, release_date="2026-10-25"),
        ]
    )

    first = client.get("/api/movies/upcoming").json()
    current[0] = date(2026, 10, 20)
    second = client.get("/api/movies/upcoming").json()

    assert [m["id"] for m in first["data"]] == [1, 2]
    assert second["cached"] is False
    assert [m["id"] for m in second["data"]] == [2]
    assert len(upstream.calls()) == 2
    assert upstream.calls()[1].url.params["primary_release_date.gte"] == "2026-10-20"


def test_discover_by_genre(client, upstream):
    upstream.tmdb["discover/movie"] = page_of([movie(5)])

    response = client.get("/api/movies/discover", params={"genres": "27,53"})

    assert response.status_code == 200
    assert upstream.calls()[0].url.params["with_genres"] == "27,53"


def test_discover_rejects_bad_genres(client, upstream):
    response = client.get("/api/movies/discover", params={"genres": "horror"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_GENRES"
    assert upstream.requests == []


def test_search_movies(client, upstream):
    upstream.tmdb["search/movie"] = page_of([movie(348, title="Alien")], total_pages=3)

    response = client.post("/api/movies/search", json={"query": " alien ", "page": 1, "language": "es-ES"})

    assert response.status_code == 200
    data = response.json()
    assert data["data"][0]["title"] == "Alien"
    assert data["pagination"]["totalPages"] == 3
    params = upstream.calls()[0].url.params
    assert params["query"] == "alien"
    assert params["language"] == "es-ES"


def test_random_movie_filters(client, upstream):
    upstream.tmdb["discover/movie"] = page_of([movie(i) for i in range(1, 31)])

    response = client.post(
        "/api/movies/random",
        json={
            "genres": [27, 53],
            "yearStart": 1980,
            "yearEnd": 1989,
            "minVotes": 100,
            "minRating": 6,
            "maxRating": 9,
            "excludeAdult": True,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert 1 <= data["data"]["id"] <= 20

    params = upstream.calls()[0].url.params
    assert params["with_genres"] == "27|53"
    assert params["primary_release_date.gte"] == "1980-01-01"
    assert params["primary_release_date.lte"] == "1989-12-31"
    assert params["vote_count.gte"] == "100"
    assert params["include_adult"] == "false"
    assert params["page"] == "1"


def test_random_movie_none_found(client, upstream):
    upstream.tmdb["discover/movie"] = page_of([])

    response = client.post("/api/movies/random", json={"genres": [99]})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"] is None
    assert "No movies found" in data["message"]


def test_credits(client, upstream):
    upstream.tmdb["movie/550/credits"] = {
        "id": 550,
        "cast": [{"id": 819, "name": "Edward Norton", "order": 0, "profile_path": "/en.jpg"}],
        "crew": [{"id": 7467, "name": "David Fincher", "department": "Directing", "job": "Director"}],
    }

    response = client.get("/api/movies/550/credits")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cast"][0]["profile_url"] == "https://image.tmdb.org/t/p/w185/en.jpg"
    assert data["crew"][0]["name"] == "David Fincher"


def test_cast_is_ordered_and_limited(client, upstream):
    upstream.tmdb["movie/550/credits"] = {
        "id": 550,
        "cast": [
            {"id": 3, "name": "C", "order": 2},
            {"id": 1, "name": "A", "order": 0},
            {"id": 2, "name": "B", "order": 1},
        ],
        "crew": [],
    }

    response = client.get("/api/movies/550/cast", params={"limit": 2})

    data = response.json()
    assert [p["name"] for p in data["data"]] == ["A", "B"]
    assert data["count"] == 2


def test_crew_department_filter_is_case_insensitive_exact(client, upstream):
    upstream.tmdb["movie/550/credits"] = {
        "id": 550,
        "cast": [],
        "crew": [
            {"id": 1, "name": "Director", "department": "Directing", "job": "Director"},
            {"id": 2, "name": "Writer", "department": "Writing", "job": "Screenplay"},
            {"id": 3, "name": "Assistant", "department": "Directing Assistants", "job": "Assistant"},
        ],
    }

    response = client.get("/api/movies/550/crew", params={"department": "directing"})

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == [1]

    unfiltered = client.get("/api/movies/550/crew")
    assert unfiltered.json()["count"] == 3


def test_providers_for_country(client, upstream):
    upstream.tmdb["movie/550/watch/providers"] = {
        "id": 550,
        "results": {
            "US": {"link": "https://example.test/us", "flatrate": [{"provider_name": "Netflix"}]},
            "ES": {"link": "https://example.test/es", "rent": [{"provider_name": "Rakuten"}]},
        },
    }

    response = client.get("/api/movies/550/providers", params={"country": "es"})

    data = response.json()["data"]
    assert data["available"] is True
    assert data["country"] == "ES"
    assert data["rent"][0]["provider_name"] == "Rakuten"
    assert data["availableCountries"] == ["ES", "US"]


def test_providers_missing_country_is_not_an_error(client, upstream):
    upstream.tmdb["movie/550/watch/providers"] = {"id": 550, "results": {"US": {"link": "x"}}}

    response = client.get("/api/movies/550/providers", params={"country": "JP"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["available"] is False
    assert body["data"]["availableCountries"] == ["US"]
    assert "JP" in body["message"]


def test_videos_trailers_first(client, upstream):
    upstream.tmdb["movie/550/videos"] = {
        "id": 550,
        "results": [
            {"key": "a", "type": "Featurette", "official": True},
            {"key": "b", "type": "Trailer", "official": False},
            {"key": "c", "type": "Trailer", "official": True},
        ],
    }

    response = client.get("/api/movies/550/videos")

    assert [v["key"] for v in response.json()["data"]] == ["c", "b", "a"]


def test_complete_aggregate(client, upstream):
    upstream.tmdb["movie/550"] = {
        **movie(550, title="Fight Club"),
        "credits": {
            "cast": [{"id": 819, "name": "Edward Norton", "order": 0}],
            "crew": [
                {"id": 7467, "name": "David Fincher", "job": "Director"},
                {"id": 1, "name": "Grip", "job": "Key Grip"},
            ],
        },
        "videos": {"results": [{"key": "t", "type": "Trailer"}]},
        "watch/providers": {"results": {"US": {"link": "x", "buy": [{"provider_name": "Apple"}]}}},
    }

    response = client.get("/api/movies/550/complete")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Fight Club"
    assert data["directors"] == ["David Fincher"]
    assert [p["name"] for p in data["crew"]] == ["David Fincher"]
    assert data["cast"][0]["name"] == "Edward Norton"
    assert data["videos"][0]["key"] == "t"
    assert data["providers"]["available"] is True
    assert "credits" not in data
    assert upstream.calls()[0].url.params["append_to_response"] == "credits,videos,watch/providers"


def test_genres(client, upstream):
    upstream.tmdb["genre/movie/list"] = {"genres": [{"id": 27, "name": "Horror"}]}

    response = client.get("/api/movies/genres")

    assert response.json()["data"] == [{"id": 27, "name": "Horror"}]
