from __future__ import annotations

import asyncio
import math
import unittest

from score_sync.entities.score import LeaderboardPage, LookupStatus, ScoreRecord
from score_sync.services.player_search import PlayerSearch


class InMemoryPages:
    def __init__(self, names: list[str], fail_on_page: int | None = None):
        self.records = [ScoreRecord(id=i, player_name=name, score=i) for i, name in enumerate(names, start=1)]
        self.fail_on_page = fail_on_page
        self.requested: list[tuple[int, int]] = []

    async def __call__(self, page: int, page_size: int) -> LeaderboardPage | None:
        self.requested.append((page, page_size))
        if page == self.fail_on_page:
            return None
        start = (page - 1) * page_size
        return LeaderboardPage(page=page, page_size=page_size, records=self.records[start:start + page_size])


class TestPlayerSearch(unittest.TestCase):
    def test_stops_on_first_page_with_a_match(self):
        pages = InMemoryPages(["Ann", "bob"])
        search = PlayerSearch(pages)

        lookup = asyncio.run(search.find("Ann"))

        self.assertEqual(lookup.status, LookupStatus.FOUND)
        self.assertEqual(lookup.record.id, 1)
        self.assertEqual(pages.requested, [(1, 100)])

    def test_name_comparison_is_case_sensitive(self):
        pages = InMemoryPages(["Ann", "bob"])

        lookup = asyncio.run(PlayerSearch(pages).find("BOB"))

        self.assertEqual(lookup.status, LookupStatus.NOT_FOUND)
        self.assertIsNone(lookup.record)

    def test_surrounding_whitespace_is_ignored(self):
        lookup = asyncio.run(PlayerSearch(InMemoryPages(["Ann"])).find("  Ann "))

        self.assertTrue(lookup.found)

    def test_walks_pages_until_a_short_page(self):
        names = [f"p{i}" for i in range(25)]
        pages = InMemoryPages(names)

        lookup = asyncio.run(PlayerSearch(pages, page_size=10).find("missing"))

        self.assertEqual(lookup.status, LookupStatus.NOT_FOUND)
        self.assertEqual([p for p, _ in pages.requested], [1, 2, 3])
        self.assertEqual(lookup.pages_visited, math.ceil(len(names) / 10))

    def test_finds_record_on_a_later_page(self):
        pages = InMemoryPages([f"p{i}" for i in range(25)])

        lookup = asyncio.run(PlayerSearch(pages, page_size=10).find("p21"))

        self.assertEqual(lookup.record.player_name, "p21")
        self.assertEqual(lookup.pages_visited, 3)

    def test_max_pages_bounds_the_walk(self):
        pages = InMemoryPages([f"p{i}" for i in range(100)])

        lookup = asyncio.run(PlayerSearch(pages, page_size=10, max_pages=4).find("p99"))

        self.assertEqual(lookup.status, LookupStatus.NOT_FOUND)
        self.assertEqual(len(pages.requested), 4)

    def test_per_call_max_pages_overrides_default(self):
        pages = InMemoryPages([f"p{i}" for i in range(100)])

        asyncio.run(PlayerSearch(pages, page_size=10).find("nobody", max_pages=2))

        self.assertEqual(len(pages.requested), 2)

    def test_first_match_wins_for_duplicate_names(self):
        pages = InMemoryPages(["Ann", "Ann"])

        lookup = asyncio.run(PlayerSearch(pages).find("Ann"))

        self.assertEqual(lookup.record.id, 1)

    def test_failed_page_is_reported_as_failure(self):
        pages = InMemoryPages([f"p{i}" for i in range(15)], fail_on_page=2)

        lookup = asyncio.run(PlayerSearch(pages, page_size=10).find("nobody"))

        self.assertEqual(lookup.status, LookupStatus.FAILED)
        self.assertTrue(lookup.failed)
        self.assertEqual(lookup.pages_visited, 2)

    def test_blank_name_makes_no_request(self):
        pages = InMemoryPages(["Ann"])

        lookup = asyncio.run(PlayerSearch(pages).find("   "))

        self.assertEqual(lookup.status, LookupStatus.NOT_FOUND)
        self.assertEqual(pages.requested, [])

    def test_rejects_non_positive_page_size(self):
        with self.assertRaises(ValueError):
            PlayerSearch(InMemoryPages([]), page_size=0)

    def test_rejects_non_positive_max_pages(self):
        pages = InMemoryPages(["Ann"])

        with self.assertRaises(ValueError):
            PlayerSearch(pages, max_pages=0)
        with self.assertRaises(ValueError):
            asyncio.run(PlayerSearch(pages).find("Ann", max_pages=0))
        self.assertEqual(pages.requested, [])


if __name__ == "__main__":
    unittest.main()
