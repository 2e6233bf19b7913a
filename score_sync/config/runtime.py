from __future__ import annotations

from dataclasses import dataclass
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ScoreSyncSettings:
    base_url: str = "http://localhost:5289"
    request_timeout_seconds: float = 10.0
    log_requests: bool = False
    search_page_size: int = 100
    max_search_pages: int = 10
    use_utc7_timestamps: bool = False
    leaderboard_page_size: int = 5
    wait_for_server: bool = True

    @classmethod
    def from_env(cls) -> "ScoreSyncSettings":
        return cls(
            base_url=os.getenv("SCORE_API_BASE_URL", "http://localhost:5289"),
            request_timeout_seconds=float(os.getenv("SCORE_API_TIMEOUT_SECONDS", "10")),
            log_requests=_env_flag("SCORE_API_LOG_REQUESTS"),
            search_page_size=int(os.getenv("SCORE_SEARCH_PAGE_SIZE", "100")),
            max_search_pages=int(os.getenv("SCORE_SEARCH_MAX_PAGES", "10")),
            use_utc7_timestamps=_env_flag("SCORE_TIMESTAMPS_UTC7"),
            leaderboard_page_size=int(os.getenv("LEADERBOARD_PAGE_SIZE", "5")),
            wait_for_server=_env_flag("SCORE_WAIT_FOR_SERVER", "true"),
        )
