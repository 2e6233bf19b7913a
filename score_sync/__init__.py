"""Client for the endless-runner remote leaderboard API."""

__version__ = "0.1.0"
