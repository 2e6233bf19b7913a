from score_sync.schemas.payloads import RankPayload, ScoreListEnvelope, ScorePayload

__all__ = [
    "ScorePayload",
    "ScoreListEnvelope",
    "RankPayload",
]
