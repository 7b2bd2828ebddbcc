"""Catalog service: movie-database read operations.

Translates endpoint parameters into TMDB queries and reshapes the answers
into the payloads the handlers wrap in envelopes. Every method performs its
upstream calls through the CatalogProvider and raises the provider's domain
errors unchanged.
"""

import random
from datetime import date, timedelta
from typing import Any

from movie_gateway.protocols import CatalogProvider

UPCOMING_WINDOW_DAYS = 120
THEATRICAL_RELEASE_TYPES = "2|3"  # theatrical (limited) | theatrical
RANDOM_POOL_SIZE = 20
RANDOM_MAX_PAGE = 20
FILMOGRAPHY_LIMIT = 50
COMPLETE_CAST_LIMIT = 20
KEY_CREW_JOBS = frozenset(
    {
        "Director",
        "Screenplay",
        "Writer",
        "Novel",
        "Producer",
        "Original Music Composer",
        "Director of Photography",
    }
)


def aggregate_filmography(
    cast: list[dict[str, Any]],
    crew: list[dict[str, Any]],
    limit: int = FILMOGRAPHY_LIMIT,
) -> list[dict[str, Any]]:
    """Union acting and crew credits into one filmography.

    Credits are deduplicated by movie id with the acting credit winning, then
    sorted by descending popularity and truncated.

    Args:
        cast: Acting credits (each with "id", optional "popularity")
        crew: Crew credits (each with "id", optional "popularity")
        limit: Maximum number of movies to return

    Returns:
        Deduplicated, popularity-sorted list of credits
    """
    movies: dict[int, dict[str, Any]] = {}
    for credit in cast:
        movies.setdefault(credit["id"], {**credit, "credit_type": "cast"})
    for credit in crew:
        movies.setdefault(credit["id"], {**credit, "credit_type": "crew"})
    return sort_by_popularity(list(movies.values()))[:limit]


def directing_credits(crew: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep only credits where the person directed, one per movie."""
    movies: dict[int, dict[str, Any]] = {}
    for credit in crew:
        if credit.get("job") == "Director":
            movies.setdefault(credit["id"], {**credit, "credit_type": "crew"})
    return list(movies.values())


def sort_by_popularity(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(items, key=lambda item: item.get("popularity") or 0.0, reverse=True)


def filter_crew_by_department(
    crew: list[dict[str, Any]],
    department: str | None,
) -> list[dict[str, Any]]:
    """Case-insensitive exact match on the crew member's department."""
    if not department:
        return crew
    wanted = department.strip().lower()
    return [member for member in crew if (member.get("department") or "").lower() == wanted]


def _video_rank(video: dict[str, Any]) -> tuple[int, int]:
    return (
        0 if video.get("type") == "Trailer" else 1,
        0 if video.get("official") else 1,
    )


class CatalogService:
    """Read operations against the movie catalog.

    Example:
        ```python
        catalog = CatalogService(provider=TMDBClient.create(settings))
        payload = await catalog.trending(page=1, language="en-US")
        payload["pagination"]  # {"page": 1, "totalPages": ..., "totalResults": ...}
        ```
    """

    def __init__(
        self,
        provider: CatalogProvider,
        random_page_strategy: str = "top",
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the catalog service.

        Args:
            provider: Movie-database client (required).
            random_page_strategy: "top" draws from page 1, "random-page" from
                a uniformly chosen page among the first 20.
            rng: Random source for the random-movie endpoint.
        """
        self._provider = provider
        self._random_page_strategy = random_page_strategy
        self._rng = rng or random.Random()

    # -- shaping ---------------------------------------------------------

    def _image_url(self, path: str | None, size: str) -> str | None:
        if not path:
            return None
        return f"{self._provider.image_base_url}/{size}{path}"

    def shape_movie(self, movie: dict[str, Any]) -> dict[str, Any]:
        return {
            **movie,
            "poster_url": self._image_url(movie.get("poster_path"), "w500"),
            "backdrop_url": self._image_url(movie.get("backdrop_path"), "w1280"),
        }

    def shape_person(self, person: dict[str, Any]) -> dict[str, Any]:
        shaped = {**person, "profile_url": self._image_url(person.get("profile_path"), "w185")}
        if "known_for" in person:
            shaped["known_for"] = [self.shape_movie(m) for m in person.get("known_for") or []]
        return shaped

    def _paginated(self, data: dict[str, Any], shape=None) -> dict[str, Any]:
        shape = shape or self.shape_movie
        return {
            "results": [shape(item) for item in data.get("results") or []],
            "pagination": {
                "page": data.get("page", 1),
                "totalPages": data.get("total_pages", 0),
                "totalResults": data.get("total_results", 0),
            },
        }

    # -- listings ----------------------------------------------------------

    async def now_playing(self, page: int, language: str, region: str) -> dict[str, Any]:
        data = await self._provider.get(
            "movie/now_playing",
            {"page": page, "language": language, "region": region},
        )
        return self._paginated(data)

    async def trending(self, page: int, language: str, time_window: str = "week") -> dict[str, Any]:
        data = await self._provider.get(
            f"trending/movie/{time_window}",
            {"page": page, "language": language},
        )
        return self._paginated(data)

    async def upcoming(
        self,
        page: int,
        language: str,
        region: str,
        today: date | None = None,
    ) -> dict[str, Any]:
        """Theatrical releases from today through the next 120 days.

        Overrides TMDB's own "upcoming" list with explicit discover filters
        and drops anything the upstream returns outside the window.
        """
        start = today or date.today()
        end = start + timedelta(days=UPCOMING_WINDOW_DAYS)
        data = await self._provider.get(
            "discover/movie",
            {
                "page": page,
                "language": language,
                "region": region,
                "with_release_type": THEATRICAL_RELEASE_TYPES,
                "primary_release_date.gte": start.isoformat(),
                "primary_release_date.lte": end.isoformat(),
                "sort_by": "popularity.desc",
                "include_adult": "false",
            },
        )
        payload = self._paginated(data)
        kept = [
            movie
            for movie in payload["results"]
            if start.isoformat() <= (movie.get("release_date") or "") <= end.isoformat()
        ]
        # totalResults counts only what survived the window on this page
        dropped = len(payload["results"]) - len(kept)
        pagination = payload["pagination"]
        pagination["totalResults"] = max(0, pagination["totalResults"] - dropped)
        payload["results"] = kept
        payload["window"] = {"from": start.isoformat(), "to": end.isoformat()}
        return payload

    async def discover(
        self,
        genres: list[int],
        page: int,
        language: str,
        sort_by: str = "popularity.desc",
    ) -> dict[str, Any]:
        data = await self._provider.get(
            "discover/movie",
            {
                "page": page,
                "language": language,
                "with_genres": ",".join(str(g) for g in genres) or None,
                "sort_by": sort_by,
                "include_adult": "false",
            },
        )
        return self._paginated(data)

    async def genres(self, language: str) -> list[dict[str, Any]]:
        data = await self._provider.get("genre/movie/list", {"language": language})
        return data.get("genres") or []

    async def search_movies(self, query: str, page: int, language: str) -> dict[str, Any]:
        data = await self._provider.get(
            "search/movie",
            {"query": query, "page": page, "language": language, "include_adult": "false"},
        )
        return self._paginated(data)

    # -- random ------------------------------------------------------------

    async def random_movie(
        self,
        language: str,
        genres: list[int] | None = None,
        year_start: int | None = None,
        year_end: int | None = None,
        min_votes: int | None = None,
        min_rating: float | None = None,
        max_rating: float | None = None,
        exclude_adult: bool = True,
    ) -> dict[str, Any] | None:
        """Pick one movie at random from a filtered discovery query.

        With the "top" strategy the pick is uniform over the 20 most popular
        matches. With "random-page" a page in 1..min(20, total_pages) is
        chosen uniformly first, which needs page 1 to learn total_pages.

        Returns:
            The shaped movie, or None when nothing matches
        """
        params = {
            "language": language,
            "sort_by": "popularity.desc",
            "include_adult": "false" if exclude_adult else "true",
            "with_genres": "|".join(str(g) for g in genres or []) or None,
            "primary_release_date.gte": f"{year_start}-01-01" if year_start else None,
            "primary_release_date.lte": f"{year_end}-12-31" if year_end else None,
            "vote_count.gte": min_votes,
            "vote_average.gte": min_rating,
            "vote_average.lte": max_rating,
        }

        data = await self._provider.get("discover/movie", {**params, "page": 1})
        if self._random_page_strategy == "random-page":
            last_page = min(RANDOM_MAX_PAGE, data.get("total_pages") or 1)
            page = self._rng.randint(1, max(1, last_page))
            if page != 1:
                data = await self._provider.get("discover/movie", {**params, "page": page})

        pool = (data.get("results") or [])[:RANDOM_POOL_SIZE]
        if not pool:
            return None
        return self.shape_movie(self._rng.choice(pool))

    # -- movie details -----------------------------------------------------

    async def movie_details(self, movie_id: int, language: str) -> dict[str, Any]:
        data = await self._provider.get(f"movie/{movie_id}", {"language": language})
        return self.shape_movie(data)

    async def movie_credits(self, movie_id: int, language: str) -> dict[str, Any]:
        data = await self._provider.get(f"movie/{movie_id}/credits", {"language": language})
        return {
            "id": data.get("id", movie_id),
            "cast": [self.shape_person(p) for p in data.get("cast") or []],
            "crew": [self.shape_person(p) for p in data.get("crew") or []],
        }

    async def movie_cast(
        self,
        movie_id: int,
        language: str,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        credits = await self.movie_credits(movie_id, language)
        cast = sorted(credits["cast"], key=lambda p: p.get("order", 0))
        return cast[:limit] if limit else cast

    async def movie_crew(
        self,
        movie_id: int,
        language: str,
        department: str | None = None,
    ) -> list[dict[str, Any]]:
        credits = await self.movie_credits(movie_id, language)
        return filter_crew_by_department(credits["crew"], department)

    def _providers_for_country(self, results: dict[str, Any], country: str) -> dict[str, Any]:
        country = country.upper()
        available = sorted(results)
        entry = results.get(country)
        if not entry:
            return {
                "country": country,
                "available": False,
                "availableCountries": available,
                "link": None,
                "flatrate": [],
                "rent": [],
                "buy": [],
                "message": f"No provider data for {country}",
            }
        return {
            "country": country,
            "available": True,
            "availableCountries": available,
            "link": entry.get("link"),
            "flatrate": entry.get("flatrate") or [],
            "rent": entry.get("rent") or [],
            "buy": entry.get("buy") or [],
        }

    async def movie_providers(self, movie_id: int, country: str) -> dict[str, Any]:
        """Watch providers for a single country.

        Missing data for the country is a normal answer, not an error; the
        payload lists which countries do have data.
        """
        data = await self._provider.get(f"movie/{movie_id}/watch/providers")
        return self._providers_for_country(data.get("results") or {}, country)

    async def movie_videos(self, movie_id: int, language: str) -> list[dict[str, Any]]:
        data = await self._provider.get(f"movie/{movie_id}/videos", {"language": language})
        return sorted(data.get("results") or [], key=_video_rank)

    async def movie_complete(self, movie_id: int, language: str, country: str) -> dict[str, Any]:
        """Details, credits, videos and providers in a single upstream call."""
        data = await self._provider.get(
            f"movie/{movie_id}",
            {"language": language, "append_to_response": "credits,videos,watch/providers"},
        )
        credits = data.pop("credits", None) or {}
        videos = data.pop("videos", None) or {}
        providers = data.pop("watch/providers", None) or {}

        cast = sorted(credits.get("cast") or [], key=lambda p: p.get("order", 0))
        crew = [p for p in credits.get("crew") or [] if p.get("job") in KEY_CREW_JOBS]
        return {
            **self.shape_movie(data),
            "cast": [self.shape_person(p) for p in cast[:COMPLETE_CAST_LIMIT]],
            "crew": [self.shape_person(p) for p in crew],
            "directors": [p["name"] for p in crew if p.get("job") == "Director"],
            "videos": sorted(videos.get("results") or [], key=_video_rank),
            "providers": self._providers_for_country(providers.get("results") or {}, country),
        }

    # -- people ------------------------------------------------------------

    async def search_people(self, query: str, page: int, language: str) -> dict[str, Any]:
        data = await self._provider.get(
            "search/person",
            {"query": query, "page": page, "language": language, "include_adult": "false"},
        )
        return self._paginated(data, shape=self.shape_person)

    async def person_details(self, person_id: int, language: str) -> dict[str, Any]:
        data = await self._provider.get(f"person/{person_id}", {"language": language})
        return self.shape_person(data)

    async def person_credits(self, person_id: int, language: str) -> dict[str, Any]:
        return await self._provider.get(f"person/{person_id}/movie_credits", {"language": language})

    async def person_movies(self, person_id: int, language: str) -> list[dict[str, Any]]:
        credits = await self.person_credits(person_id, language)
        movies = aggregate_filmography(credits.get("cast") or [], credits.get("crew") or [])
        return [self.shape_movie(m) for m in movies]
