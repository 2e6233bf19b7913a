"""JSON codec between the remote score API and :class:`ScoreRecord`.

The API emits lower camel case keys (``playerName``) while records are
decoded from the capitalized spelling (``PlayerName``). Only the known
record keys are renamed, values are never touched.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from score_sync.entities.score import RankRecord, ScoreRecord
from score_sync.schemas.payloads import RankPayload, ScoreListEnvelope, ScorePayload

logger = logging.getLogger(__name__)

# Applied in this order; "playername" covers servers that lowercase the whole key.
KEY_ALIASES: tuple[tuple[str, str], ...] = (
    ("id", "Id"),
    ("playerName", "PlayerName"),
    ("score", "Score"),
    ("createdAt", "CreatedAt"),
    ("playername", "PlayerName"),
)

LIST_ENVELOPE_KEY = "items"

_ALIAS_LOOKUP = dict(KEY_ALIASES)
_LOG_PREVIEW_CHARS = 200


def encode_record(record: ScoreRecord, *, include_id: bool = False) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if include_id:
        body["id"] = record.id
    body["playerName"] = record.player_name
    body["score"] = record.score
    body["createdAt"] = record.created_at
    return body


def normalize_keys(obj: dict[str, Any]) -> dict[str, Any]:
    """Rename the known record keys to their capitalized form, keeping key order."""
    normalized: dict[str, Any] = {}
    for key, value in obj.items():
        normalized[_ALIAS_LOOKUP.get(key, key)] = value
    return normalized


def wrap_array_root(text: str) -> str:
    if text.lstrip().startswith("["):
        return '{"%s":%s}' % (LIST_ENVELOPE_KEY, text)
    return text


def decode_records(text: str | None) -> list[ScoreRecord] | None:
    """Decode a page body. Blank bodies are an empty page, malformed ones ``None``."""
    if not text or not text.strip():
        return []

    try:
        root = json.loads(wrap_array_root(text))
        if not isinstance(root, dict):
            raise ValueError(f"expected a JSON object or array, got {type(root).__name__}")
        items = root.get(LIST_ENVELOPE_KEY)
        if isinstance(items, list):
            root = {
                **root,
                LIST_ENVELOPE_KEY: [normalize_keys(item) if isinstance(item, dict) else item for item in items],
            }
        envelope = ScoreListEnvelope.model_validate(root)
    except (ValueError, ValidationError) as exc:
        _warn_decode_failure("score list", exc, text)
        return None

    return [item.to_record() for item in envelope.items]


def decode_record(text: str | None) -> ScoreRecord | None:
    if not text or not text.strip():
        return None

    try:
        root = json.loads(text)
        if not isinstance(root, dict):
            raise ValueError(f"expected a JSON object, got {type(root).__name__}")
        payload = ScorePayload.model_validate(normalize_keys(root))
    except (ValueError, ValidationError) as exc:
        _warn_decode_failure("score record", exc, text)
        return None

    return payload.to_record()


def decode_rank(text: str | None) -> RankRecord | None:
    if not text or not text.strip():
        return None

    try:
        root = json.loads(text)
        if not isinstance(root, dict):
            raise ValueError(f"expected a JSON object, got {type(root).__name__}")
        payload = RankPayload.model_validate(root)
    except (ValueError, ValidationError) as exc:
        _warn_decode_failure("rank", exc, text)
        return None

    return payload.to_record()


def _warn_decode_failure(what: str, exc: Exception, text: str) -> None:
    preview = text if len(text) <= _LOG_PREVIEW_CHARS else text[:_LOG_PREVIEW_CHARS] + "..."
    logger.warning("could not decode %s: %s json=%s", what, exc, preview)
