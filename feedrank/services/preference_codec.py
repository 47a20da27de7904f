"""
Codec between in-memory interaction/preference models and their stored JSON strings.

Sets are written as sorted lists and category_scores as ordered [tag, score]
pairs, so nothing depends on how a JSON library treats containers.
"""

import json
from typing import Any, Dict, List

from ..models.interaction import InteractionRecord, PreferenceProfile, ensure_interactions


def encode_preferences(profile: PreferenceProfile) -> str:
    payload: Dict[str, Any] = {
        "favorite_creators": sorted(profile.favorite_creators),
        "favorite_hashtags": sorted(profile.favorite_hashtags),
        "category_scores": [[k, v] for k, v in sorted(profile.category_scores.items())],
        "avg_watch_time_seconds": profile.avg_watch_time_seconds,
        "total_items_watched": profile.total_items_watched,
    }
    return json.dumps(payload)


def decode_preferences(raw: str) -> PreferenceProfile:
    """Parse a stored profile. Raises ValueError on malformed payloads."""
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Stored preferences must be a JSON object")
    return PreferenceProfile(
        favorite_creators=set(data.get("favorite_creators") or []),
        favorite_hashtags=set(data.get("favorite_hashtags") or []),
        category_scores={k: v for k, v in (data.get("category_scores") or [])},
        avg_watch_time_seconds=data.get("avg_watch_time_seconds") or 0.0,
        total_items_watched=data.get("total_items_watched") or 0,
    )


def encode_interactions(records: List[InteractionRecord]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in records])


def decode_interactions(raw: str) -> List[InteractionRecord]:
    """Parse a stored interaction list. Raises ValueError on malformed payloads."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored interactions must be a JSON array")
    return ensure_interactions(data)
