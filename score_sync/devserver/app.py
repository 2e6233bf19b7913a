"""In-memory leaderboard API with the same routes as the production score service."""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Annotated

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

MAX_PAGE_SIZE = 100
FALLBACK_PAGE_SIZE = 10


# ------------------------------------------------------------------------------
# Pydantic Schemas
# ------------------------------------------------------------------------------

class ScoreEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    player_name: str = Field(alias="playerName", min_length=1)
    score: int = Field(default=0, ge=0)
    created_at: str = Field(default="", alias="createdAt")


class RankResponse(BaseModel):
    player: str
    score: int
    rank: int


# ------------------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------------------

class InMemoryScoreBook:
    def __init__(self):
        self._entries: dict[int, ScoreEntry] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def ranked(self) -> list[ScoreEntry]:
        with self._lock:
            return sorted(self._entries.values(), key=lambda entry: (-entry.score, entry.id))

    def page(self, page: int, page_size: int) -> tuple[list[ScoreEntry], int]:
        entries = self.ranked()
        start = (page - 1) * page_size
        return entries[start:start + page_size], len(entries)

    def get(self, entry_id: int) -> ScoreEntry | None:
        with self._lock:
            return self._entries.get(entry_id)

    def add(self, entry: ScoreEntry) -> ScoreEntry:
        with self._lock:
            created = entry.model_copy(update={
                "id": self._next_id,
                "created_at": entry.created_at or datetime.now(timezone.utc).isoformat(),
            })
            self._entries[created.id] = created
            self._next_id += 1
            return created

    def replace(self, entry_id: int, entry: ScoreEntry) -> bool:
        with self._lock:
            if entry_id not in self._entries:
                return False
            self._entries[entry_id] = entry.model_copy(update={"id": entry_id})
            return True

    def remove(self, entry_id: int) -> bool:
        with self._lock:
            return self._entries.pop(entry_id, None) is not None

    def rank_of(self, player_name: str) -> RankResponse | None:
        entries = self.ranked()
        entry = next((e for e in entries if e.player_name == player_name), None)
        if entry is None:
            return None
        higher = sum(1 for e in entries if e.score > entry.score)
        return RankResponse(player=entry.player_name, score=entry.score, rank=higher + 1)


# ------------------------------------------------------------------------------
# FastAPI App
# ------------------------------------------------------------------------------

def create_app(book: InMemoryScoreBook | None = None) -> FastAPI:
    book = book or InMemoryScoreBook()
    app = FastAPI(title="Leaderboard API (development)")
    app.state.book = book

    @app.get("/api/scores", response_model=list[ScoreEntry])
    def list_scores(
        response: Response,
        page: int = 1,
        page_size: Annotated[int, Query(alias="pageSize")] = FALLBACK_PAGE_SIZE,
    ):
        page = max(page, 1)
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            page_size = FALLBACK_PAGE_SIZE
        entries, total = book.page(page, page_size)
        response.headers["X-Total-Count"] = str(total)
        return entries

    @app.post("/api/scores", response_model=ScoreEntry, status_code=status.HTTP_201_CREATED)
    def create_score(entry: ScoreEntry):
        return book.add(entry)

    @app.get("/api/scores/rank/{player_name}", response_model=RankResponse)
    def get_rank(player_name: str):
        rank = book.rank_of(player_name)
        if rank is None:
            raise HTTPException(status_code=404, detail=f"player {player_name!r} not found")
        return rank

    @app.get("/api/scores/{entry_id}", response_model=ScoreEntry)
    def get_score(entry_id: int):
        entry = book.get(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"score {entry_id} not found")
        return entry

    @app.put("/api/scores/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    def update_score(entry_id: int, entry: ScoreEntry):
        if entry.id and entry.id != entry_id:
            raise HTTPException(status_code=400, detail="id in body does not match the url")
        if not book.replace(entry_id, entry):
            raise HTTPException(status_code=404, detail=f"score {entry_id} not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/api/scores/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_score(entry_id: int):
        if not book.remove(entry_id):
            raise HTTPException(status_code=404, detail=f"score {entry_id} not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def serve(host: str = "127.0.0.1", port: int = 5289) -> None:
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    serve()
