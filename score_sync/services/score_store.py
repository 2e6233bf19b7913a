from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import quote

from score_sync.config.runtime import ScoreSyncSettings
from score_sync.entities.score import LeaderboardPage, LookupStatus, PlayerLookup, RankRecord, ScoreRecord
from score_sync.infrastructure.http.record_codec import decode_rank, decode_record, decode_records, encode_record
from score_sync.infrastructure.http.transport import HttpTransport
from score_sync.services.player_search import DEFAULT_MAX_PAGES, MAX_PAGE_SIZE, PlayerSearch
from score_sync.utils.clock import TimestampClock

SCORES_PATH = "/api/scores"
TOTAL_COUNT_HEADER = "X-Total-Count"


class RemoteScoreStore:
    """Leaderboard operations against the remote score API.

    Every operation is a sequence of awaited round trips with nothing cached
    locally. Failures (transport, non-2xx, undecodable body) resolve to
    ``None``/``False`` and are logged, they are never raised.

    ``ensure_exists`` and ``upsert_score`` are get-or-create over a paginated
    search: two concurrent calls for the same unseen name can both observe
    "not found" and both create a record. Nothing here serializes them.
    """

    def __init__(
        self,
        transport: HttpTransport,
        clock: Callable[[], str] | None = None,
        search_page_size: int = MAX_PAGE_SIZE,
        max_search_pages: int = DEFAULT_MAX_PAGES,
    ):
        self.transport = transport
        self.clock = clock or TimestampClock()
        self.search = PlayerSearch(
            fetch_page=self.get_leaderboard_page,
            page_size=search_page_size,
            max_pages=max_search_pages,
        )
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: ScoreSyncSettings, session=None) -> "RemoteScoreStore":
        transport = HttpTransport(
            base_url=settings.base_url,
            timeout_seconds=settings.request_timeout_seconds,
            log_requests=settings.log_requests,
            session=session,
        )
        return cls(
            transport=transport,
            clock=TimestampClock(use_utc7=settings.use_utc7_timestamps),
            search_page_size=settings.search_page_size,
            max_search_pages=settings.max_search_pages,
        )

    async def get_leaderboard_page(self, page: int, page_size: int) -> LeaderboardPage | None:
        result = await self.transport.send("GET", SCORES_PATH, params={"page": page, "pageSize": page_size})
        if not result.ok:
            return None

        records = decode_records(result.text)
        if records is None:
            return None

        return LeaderboardPage(
            page=page,
            page_size=page_size,
            records=records,
            total=_parse_total(result.header(TOTAL_COUNT_HEADER)),
        )

    async def get_record(self, record_id: int) -> ScoreRecord | None:
        result = await self.transport.send("GET", f"{SCORES_PATH}/{record_id}")
        if not result.ok:
            return None
        return decode_record(result.text)

    async def find_player(self, player_name: str, max_pages: int | None = None) -> PlayerLookup:
        return await self.search.find(player_name, max_pages=max_pages)

    async def ensure_exists(self, player_name: str) -> ScoreRecord | None:
        lookup = await self.find_player(player_name)
        if lookup.found:
            return lookup.record
        if not self._may_create(lookup, player_name):
            return None

        return await self._create(player_name, score=0)

    async def upsert_score(self, player_name: str, score: int) -> ScoreRecord | None:
        lookup = await self.find_player(player_name)
        if not lookup.found:
            if not self._may_create(lookup, player_name):
                return None
            return await self._create(player_name, score=score)

        updated = lookup.record.with_score(score, created_at=self.clock())
        result = await self.transport.send(
            "PUT",
            f"{SCORES_PATH}/{updated.id}",
            json_body=encode_record(updated, include_id=True),
        )
        if not result.ok:
            return None

        # PUT answers 204 without a body; read the stored record back.
        refreshed = await self.get_record(updated.id)
        if refreshed is None:
            self.logger.info("could not re-read score record %d after update, using local copy", updated.id)
            return updated
        return refreshed

    async def delete(self, player_name: str) -> bool:
        lookup = await self.find_player(player_name)
        if not lookup.found:
            return False

        result = await self.transport.send("DELETE", f"{SCORES_PATH}/{lookup.record.id}")
        return result.ok

    async def get_rank(self, player_name: str | None) -> RankRecord | None:
        if player_name is None or not player_name.strip():
            return None

        result = await self.transport.send("GET", f"{SCORES_PATH}/rank/{quote(player_name, safe='')}")
        if not result.ok:
            return None
        return decode_rank(result.text)

    async def _create(self, player_name: str, score: int) -> ScoreRecord | None:
        record = ScoreRecord(player_name=player_name.strip(), score=score, created_at=self.clock())
        result = await self.transport.send("POST", SCORES_PATH, json_body=encode_record(record))
        if not result.ok:
            return None
        return decode_record(result.text)

    def _may_create(self, lookup: PlayerLookup, player_name: str) -> bool:
        if lookup.status == LookupStatus.FAILED:
            self.logger.warning("not creating a record for %r: player lookup failed", player_name)
            return False
        if not (player_name or "").strip():
            self.logger.warning("not creating a record for a blank player name")
            return False
        return True


def _parse_total(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
