"""
feedrank — short-video feed ranking core

Single entry point for the package:
- models/: FeedConfig, Item, InteractionRecord, PreferenceProfile, ScoreResult
- scoring/: score_item, recommend, initial_feed, ScoringEngine
- services/: InteractionStore, FeedQueue, key-value store adapters
- session: FeedSession (per-viewer owner of the services)
"""

from .models.config import DEFAULT_CONFIG, FeedConfig, resolve_config
from .models.interaction import InteractionRecord, PreferenceProfile
from .models.item import Creator, Item, ensure_items
from .models.scoring import ScoredItem, ScoreResult
from .scoring import (
    ScoringEngine,
    initial_feed,
    rank_candidates,
    recommend,
    score_item,
)
from .services import (
    FeedQueue,
    InMemoryKeyValueStore,
    InteractionStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    QueueStatus,
)
from .session import FeedSession
from .settings import Settings, get_settings, reload_settings

__all__ = [
    "DEFAULT_CONFIG",
    "Creator",
    "FeedConfig",
    "FeedQueue",
    "FeedSession",
    "InMemoryKeyValueStore",
    "InteractionRecord",
    "InteractionStore",
    "Item",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PreferenceProfile",
    "QueueStatus",
    "ScoreResult",
    "ScoredItem",
    "ScoringEngine",
    "Settings",
    "ensure_items",
    "get_settings",
    "initial_feed",
    "rank_candidates",
    "recommend",
    "reload_settings",
    "resolve_config",
    "score_item",
]
