from __future__ import annotations

import asyncio
import logging
import unittest
from unittest.mock import AsyncMock

from score_sync.config.runtime import ScoreSyncSettings
from score_sync.entities.score import LeaderboardPage, ScoreRecord
from score_sync.infrastructure.http.transport import HttpTransport
from score_sync.services.game_session import DEFAULT_PLAYER_NAME, GameScoreSession
from score_sync.services.score_store import RemoteScoreStore
from score_api_fakes import FakeScoreApi


def _session(api: FakeScoreApi, **kwargs) -> GameScoreSession:
    store = RemoteScoreStore(HttpTransport(base_url="http://scores.test", session=api), clock=lambda: "now")
    return GameScoreSession(store, **kwargs)


class TestConfirmPlayerName(unittest.TestCase):
    def test_blank_name_is_rejected_without_requests(self):
        api = FakeScoreApi()
        session = _session(api)

        self.assertFalse(asyncio.run(session.confirm_player_name("   ")))
        self.assertIsNone(session.player_name)
        self.assertEqual(api.calls, [])

    def test_confirmed_name_is_registered(self):
        api = FakeScoreApi()
        session = _session(api)

        self.assertTrue(asyncio.run(session.confirm_player_name("  Ann ")))

        self.assertEqual(session.player_name, "Ann")
        self.assertEqual(api.find("Ann")[0]["score"], 0)

    def test_server_failure_does_not_block_the_player(self):
        api = FakeScoreApi()
        api.fail[("POST", "/api/scores")] = 500
        session = _session(api)

        with self.assertLogs("score_sync.services.game_session", level=logging.WARNING):
            confirmed = asyncio.run(session.confirm_player_name("Ann"))

        self.assertTrue(confirmed)
        self.assertEqual(session.player_name, "Ann")

    def test_registration_can_be_skipped(self):
        api = FakeScoreApi()
        session = _session(api, wait_for_server=False)

        self.assertTrue(asyncio.run(session.confirm_player_name("Ann")))
        self.assertEqual(api.calls, [])


class TestGameFlow(unittest.TestCase):
    def test_new_game_uses_default_name_until_one_is_confirmed(self):
        api = FakeScoreApi()
        session = _session(api)

        record = asyncio.run(session.start_new_game())

        self.assertEqual(record.player_name, DEFAULT_PLAYER_NAME)

    def test_game_over_submits_floored_score_and_refreshes_leaderboard(self):
        api = FakeScoreApi.with_players(("Ann", 10), ("bob", 5))
        session = _session(api, leaderboard_page_size=5)
        session.player_name = "bob"

        result = asyncio.run(session.game_over(41.9))

        self.assertTrue(result.synced)
        self.assertEqual(result.record.score, 41)
        self.assertEqual(api.calls_for("PUT")[0][3]["score"], 41)
        self.assertEqual(api.calls[-1][2], {"page": 1, "pageSize": 5})
        self.assertIs(session.leaderboard, result.leaderboard)

    def test_game_over_still_refreshes_when_submit_fails(self):
        api = FakeScoreApi.with_players(("Ann", 10))
        api.fail[("PUT", "/api/scores/1")] = 500
        session = _session(api)
        session.player_name = "Ann"

        result = asyncio.run(session.game_over(12))

        self.assertFalse(result.synced)
        self.assertEqual(len(result.leaderboard.records), 1)

    def test_failed_refresh_keeps_previous_leaderboard(self):
        store = AsyncMock(spec=RemoteScoreStore)
        previous = LeaderboardPage(page=1, page_size=5, records=[ScoreRecord(player_name="Ann", score=1, id=1)])
        store.get_leaderboard_page.return_value = None
        session = GameScoreSession(store)
        session.leaderboard = previous

        self.assertIsNone(asyncio.run(session.refresh_leaderboard()))
        self.assertIs(session.leaderboard, previous)

    def test_from_settings_uses_configured_page_size(self):
        settings = ScoreSyncSettings(leaderboard_page_size=8)
        store = AsyncMock(spec=RemoteScoreStore)

        session = GameScoreSession.from_settings(settings, store=store)
        asyncio.run(session.refresh_leaderboard())

        store.get_leaderboard_page.assert_awaited_once_with(1, 8)

    def test_from_settings_can_skip_server_registration(self):
        store = AsyncMock(spec=RemoteScoreStore)

        session = GameScoreSession.from_settings(ScoreSyncSettings(wait_for_server=False), store=store)

        self.assertTrue(asyncio.run(session.confirm_player_name("Ann")))
        store.ensure_exists.assert_not_awaited()

    def test_delete_entry_refreshes_only_after_success(self):
        api = FakeScoreApi.with_players(("Ann", 10), ("bob", 5))
        session = _session(api)

        self.assertTrue(asyncio.run(session.delete_entry("bob")))
        self.assertEqual([r.player_name for r in session.leaderboard.records], ["Ann"])

        calls_before = len(api.calls)
        self.assertFalse(asyncio.run(session.delete_entry("bob")))
        self.assertEqual(len(api.calls), calls_before + 1)


if __name__ == "__main__":
    unittest.main()
