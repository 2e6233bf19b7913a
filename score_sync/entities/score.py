from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum


@dataclass
class ScoreRecord:
    """One player's leaderboard entry as stored by the remote score API.

    ``id`` stays 0 until the record has been created remotely. ``created_at``
    is rewritten on every score update, it is not an immutable creation time.
    """
    player_name: str
    score: int = 0
    created_at: str = ""
    id: int = 0

    def with_score(self, score: int, created_at: str) -> "ScoreRecord":
        return replace(self, score=score, created_at=created_at)


@dataclass
class LeaderboardPage:
    page: int
    page_size: int
    records: list[ScoreRecord] = field(default_factory=list)
    total: int | None = None  # from the X-Total-Count header, when sent


@dataclass(frozen=True)
class RankRecord:
    player: str
    score: int
    rank: int


class LookupStatus(StrEnum):
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PlayerLookup:
    """Outcome of a paginated search for one player name."""
    status: LookupStatus
    record: ScoreRecord | None = None
    pages_visited: int = 0

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND

    @property
    def failed(self) -> bool:
        return self.status == LookupStatus.FAILED
