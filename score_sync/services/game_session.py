"""Score-related calls a game makes over one play session.

Holds the confirmed player name in memory and drives the store at the points
the game needs it: name confirmation, new round, game over and leaderboard
refresh. Rendering and persistence of the name are left to the host.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from score_sync.config.runtime import ScoreSyncSettings
from score_sync.entities.score import LeaderboardPage, ScoreRecord
from score_sync.services.score_store import RemoteScoreStore

DEFAULT_PLAYER_NAME = "Player"


@dataclass
class GameOverResult:
    record: ScoreRecord | None
    leaderboard: LeaderboardPage | None

    @property
    def synced(self) -> bool:
        return self.record is not None


class GameScoreSession:
    def __init__(
        self,
        store: RemoteScoreStore,
        leaderboard_page: int = 1,
        leaderboard_page_size: int = 5,
        wait_for_server: bool = True,
    ):
        self.store = store
        self.leaderboard_page = leaderboard_page
        self.leaderboard_page_size = leaderboard_page_size
        self.wait_for_server = wait_for_server
        self.player_name: str | None = None
        self.leaderboard: LeaderboardPage | None = None
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: ScoreSyncSettings, store: RemoteScoreStore | None = None) -> "GameScoreSession":
        return cls(
            store=store or RemoteScoreStore.from_settings(settings),
            leaderboard_page_size=settings.leaderboard_page_size,
            wait_for_server=settings.wait_for_server,
        )

    @property
    def current_player(self) -> str:
        return self.player_name or DEFAULT_PLAYER_NAME

    async def confirm_player_name(self, raw_name: str | None) -> bool:
        name = (raw_name or "").strip()
        if not name:
            self.logger.info("player name is blank, waiting for input")
            return False

        self.player_name = name
        if self.wait_for_server:
            record = await self.store.ensure_exists(name)
            if record is None:
                self.logger.warning("could not register player %r on the server, continuing locally", name)
        return True

    async def start_new_game(self) -> ScoreRecord | None:
        record = await self.store.ensure_exists(self.current_player)
        self.logger.info("ensure player %r: %s", self.current_player, "ok" if record is not None else "failed")
        return record

    async def game_over(self, final_score: float) -> GameOverResult:
        score = max(0, math.floor(final_score))
        record = await self.store.upsert_score(self.current_player, score)
        self.logger.info(
            "submit score %d for %r: %s", score, self.current_player, "ok" if record is not None else "failed"
        )
        leaderboard = await self.refresh_leaderboard()
        return GameOverResult(record=record, leaderboard=leaderboard)

    async def refresh_leaderboard(self) -> LeaderboardPage | None:
        page = await self.store.get_leaderboard_page(self.leaderboard_page, self.leaderboard_page_size)
        if page is not None:
            self.leaderboard = page
        return page

    async def delete_entry(self, player_name: str) -> bool:
        deleted = await self.store.delete(player_name)
        if deleted:
            await self.refresh_leaderboard()
        return deleted
