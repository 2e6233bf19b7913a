from score_sync.entities.score import (
    LeaderboardPage,
    LookupStatus,
    PlayerLookup,
    RankRecord,
    ScoreRecord,
)

__all__ = [
    "ScoreRecord",
    "LeaderboardPage",
    "RankRecord",
    "LookupStatus",
    "PlayerLookup",
]
