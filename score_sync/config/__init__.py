from score_sync.config.runtime import ScoreSyncSettings

__all__ = ["ScoreSyncSettings"]
