from score_sync.services.game_session import GameOverResult, GameScoreSession
from score_sync.services.player_search import PlayerSearch
from score_sync.services.score_store import RemoteScoreStore

__all__ = [
    "PlayerSearch",
    "RemoteScoreStore",
    "GameScoreSession",
    "GameOverResult",
]
