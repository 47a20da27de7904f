"""Stateful services: persistence adapters, interaction store, feed queue."""

from .feed_queue import FeedQueue, QueueStatus
from .interaction_store import InteractionStore
from .kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .preference_codec import (
    decode_interactions,
    decode_preferences,
    encode_interactions,
    encode_preferences,
)

__all__ = [
    "FeedQueue",
    "InMemoryKeyValueStore",
    "InteractionStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "QueueStatus",
    "decode_interactions",
    "decode_preferences",
    "encode_interactions",
    "encode_preferences",
]
