from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from score_sync.entities.score import RankRecord, ScoreRecord


class ScorePayload(BaseModel):
    """A score record keyed the way the record type spells its fields."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int = Field(default=0, alias="Id")
    player_name: str = Field(default="", alias="PlayerName")
    score: int = Field(default=0, alias="Score")
    created_at: str = Field(default="", alias="CreatedAt")

    @field_validator("player_name", "created_at", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("id", "score", mode="before")
    @classmethod
    def _null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def to_record(self) -> ScoreRecord:
        return ScoreRecord(
            id=self.id,
            player_name=self.player_name,
            score=self.score,
            created_at=self.created_at,
        )


class ScoreListEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[ScorePayload]


class RankPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    player: str = ""
    score: int = 0
    rank: int = 0

    @field_validator("player", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_record(self) -> RankRecord:
        return RankRecord(player=self.player, score=self.score, rank=self.rank)
