"""
Tests for the random-movie page strategies of the catalog service.
"""

import asyncio
import random

import pytest

from movie_gateway.services import CatalogService


class FakeCatalog:
    """Serves 30 discover results per page, ids ``page * 100 + i``."""

    image_base_url = "https://image.tmdb.org/t/p"

    def __init__(self, total_pages: int) -> None:
        self.total_pages = total_pages
        self.pages: list[int] = []

    async def get(self, path, params=None):
        page = params["page"]
        self.pages.append(page)
        return {
            "page": page,
            "results": [{"id": page * 100 + i} for i in range(30)],
            "total_pages": self.total_pages,
        }

    async def close(self) -> None:
        pass


class ScriptedRandom:
    """Returns a fixed page and always picks the last candidate."""

    def __init__(self, page: int) -> None:
        self.page = page
        self.ranges: list[tuple[int, int]] = []

    def randint(self, a, b):
        self.ranges.append((a, b))
        return self.page

    def choice(self, seq):
        return seq[-1]


def test_random_page_beyond_first_fetches_that_page():
    catalog = FakeCatalog(total_pages=57)
    rng = ScriptedRandom(page=7)
    service = CatalogService(catalog, random_page_strategy="random-page", rng=rng)

    picked = asyncio.run(service.random_movie(language="en-US"))

    assert rng.ranges == [(1, 20)]
    assert catalog.pages == [1, 7]
    assert picked["id"] == 719


def test_random_page_range_capped_by_total_pages():
    catalog = FakeCatalog(total_pages=3)
    rng = ScriptedRandom(page=1)
    service = CatalogService(catalog, random_page_strategy="random-page", rng=rng)

    picked = asyncio.run(service.random_movie(language="en-US"))

    assert rng.ranges == [(1, 3)]
    assert catalog.pages == [1]
    assert picked["id"] == 119


@pytest.mark.parametrize("total_pages", [5, 57])
def test_seeded_random_page_stays_in_bounds(total_pages):
    last_page = min(20, total_pages)

    for seed in range(20):
        catalog = FakeCatalog(total_pages=total_pages)
        service = CatalogService(
            catalog, random_page_strategy="random-page", rng=random.Random(seed)
        )

        picked = asyncio.run(service.random_movie(language="en-US"))

        page = catalog.pages[-1]
        assert 1 <= page <= last_page
        assert catalog.pages == ([1] if page == 1 else [1, page])
        assert page * 100 <= picked["id"] < page * 100 + 20


def test_top_strategy_reads_only_first_page():
    catalog = FakeCatalog(total_pages=57)
    rng = ScriptedRandom(page=7)
    service = CatalogService(catalog, random_page_strategy="top", rng=rng)

    picked = asyncio.run(service.random_movie(language="en-US"))

    assert rng.ranges == []
    assert catalog.pages == [1]
    assert picked["id"] == 119
