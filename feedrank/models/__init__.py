"""Data models for the feed ranking core."""

from .config import DEFAULT_CONFIG, FeedConfig, resolve_config
from .interaction import (
    InteractionRecord,
    PreferenceProfile,
    completion_rate,
    ensure_interactions,
)
from .item import Creator, Item, ensure_items
from .scoring import DISCOVER_REASON, ScoredItem, ScoreResult

__all__ = [
    "DEFAULT_CONFIG",
    "DISCOVER_REASON",
    "Creator",
    "FeedConfig",
    "InteractionRecord",
    "Item",
    "PreferenceProfile",
    "ScoreResult",
    "ScoredItem",
    "completion_rate",
    "ensure_interactions",
    "ensure_items",
    "resolve_config",
]
