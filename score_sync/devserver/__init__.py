from score_sync.devserver.app import InMemoryScoreBook, create_app

__all__ = ["InMemoryScoreBook", "create_app"]
