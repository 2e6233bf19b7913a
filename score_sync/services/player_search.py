"""Locate a player's record by walking leaderboard pages.

The score API has no filter-by-name endpoint, so the search fetches pages in
order and compares names exactly (case-sensitive). A short page is the last
one; ``max_pages`` bounds the walk.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from score_sync.entities.score import LeaderboardPage, LookupStatus, PlayerLookup

MAX_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 10

PageFetcher = Callable[[int, int], Awaitable[LeaderboardPage | None]]


class PlayerSearch:
    def __init__(self, fetch_page: PageFetcher, page_size: int = MAX_PAGE_SIZE, max_pages: int = DEFAULT_MAX_PAGES):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if max_pages < 1:
            raise ValueError(f"max_pages must be positive, got {max_pages}")
        self.fetch_page = fetch_page
        self.page_size = page_size
        self.max_pages = max_pages
        self.logger = logging.getLogger(__name__)

    async def find(self, player_name: str | None, max_pages: int | None = None) -> PlayerLookup:
        limit = self.max_pages if max_pages is None else max_pages
        if limit < 1:
            raise ValueError(f"max_pages must be positive, got {limit}")

        name = (player_name or "").strip()
        if not name:
            return PlayerLookup(status=LookupStatus.NOT_FOUND)

        page_number = 1
        visited = 0

        while page_number <= limit:
            page = await self.fetch_page(page_number, self.page_size)
            visited += 1

            if page is None:
                self.logger.warning("player search for %r aborted: page %d could not be fetched", name, page_number)
                return PlayerLookup(status=LookupStatus.FAILED, pages_visited=visited)

            for record in page.records:
                if record.player_name == name:
                    return PlayerLookup(status=LookupStatus.FOUND, record=record, pages_visited=visited)

            if len(page.records) < self.page_size:
                break
            page_number += 1

        if page_number > limit:
            self.logger.info("player search for %r stopped after %d pages", name, limit)

        return PlayerLookup(status=LookupStatus.NOT_FOUND, pages_visited=visited)
