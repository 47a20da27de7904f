"""
Interaction store: per-viewer viewing outcomes and the derived preference profile.

Backed by a KeyValueStore under two keys (interactions, preferences). Persistence
is best-effort: load failures leave the store empty, save failures leave the
in-memory state in place. Callers only ever receive copies.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Set

from ..models.config import FeedConfig, resolve_config
from ..models.interaction import InteractionRecord, PreferenceProfile, completion_rate
from .kv_store import InMemoryKeyValueStore, KeyValueStore
from .preference_codec import (
    decode_interactions,
    decode_preferences,
    encode_interactions,
    encode_preferences,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionStore:
    """
    Single-writer store for one viewer.

    track_view() mutates memory synchronously and schedules a save; flush()
    waits for scheduled saves. Saves serialize state at scheduling time, so
    overlapping saves resolve last-save-wins.
    """

    def __init__(
        self,
        kv_store: Optional[KeyValueStore] = None,
        config: Optional[FeedConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._kv = kv_store if kv_store is not None else InMemoryKeyValueStore()
        self.config = resolve_config(config)
        self._clock = clock
        self._interactions: List[InteractionRecord] = []
        self._preferences = PreferenceProfile()
        self._pending: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load both structures; any failure leaves them empty."""
        try:
            raw_interactions, raw_preferences = await asyncio.gather(
                self._kv.get(self.config.interactions_key),
                self._kv.get(self.config.preferences_key),
            )
            interactions = decode_interactions(raw_interactions) if raw_interactions else []
            preferences = decode_preferences(raw_preferences) if raw_preferences else PreferenceProfile()
        except Exception as e:
            logger.warning("[store] failed to load interactions: %s: %s", type(e).__name__, e)
            self._interactions = []
            self._preferences = PreferenceProfile()
            return
        self._interactions = interactions[: self.config.max_interactions]
        self._preferences = preferences
        logger.info(
            "[store] loaded %s interactions, %s items watched",
            len(self._interactions), self._preferences.total_items_watched,
        )

    def _blobs(self) -> tuple[str, str]:
        return encode_interactions(self._interactions), encode_preferences(self._preferences)

    async def save(self) -> None:
        await self._write(*self._blobs())

    async def _write(self, interactions_blob: str, preferences_blob: str) -> None:
        try:
            await asyncio.gather(
                self._kv.set(self.config.interactions_key, interactions_blob),
                self._kv.set(self.config.preferences_key, preferences_blob),
            )
        except Exception as e:
            logger.warning("[store] failed to save interactions: %s: %s", type(e).__name__, e)

    async def _remove(self) -> None:
        try:
            await self._kv.remove(self.config.interactions_key, self.config.preferences_key)
        except Exception as e:
            logger.warning("[store] failed to remove stored keys: %s: %s", type(e).__name__, e)

    def _schedule(self, coro) -> None:
        """Run coro in the background on the current loop, or inline when no loop is running."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for every scheduled save/remove to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def track_view(
        self,
        item_id: str,
        watch_time: float,
        duration: float,
        liked: bool = False,
        commented: bool = False,
        shared: bool = False,
        creator_id: str = "",
        hashtags: Sequence[str] = (),
    ) -> InteractionRecord:
        """
        Record one end-of-view event and refresh the preference profile.

        Repeated identical calls converge: the merged record and profile do not
        change after the first one (apart from last_updated moving forward).
        """
        event = InteractionRecord(
            item_id=item_id,
            watched=True,
            watch_time_seconds=max(watch_time, 0.0),
            completion_rate=completion_rate(watch_time, duration),
            liked=liked,
            commented=commented,
            shared=shared,
            last_updated=self._clock(),
        )

        stored = event
        for idx, existing in enumerate(self._interactions):
            if existing.item_id == item_id:
                stored = existing.merged_with(event)
                self._interactions[idx] = stored
                break
        else:
            self._interactions.insert(0, event)

        if len(self._interactions) > self.config.max_interactions:
            del self._interactions[self.config.max_interactions:]

        self._update_preferences(event, creator_id, hashtags)
        self._schedule(self._write(*self._blobs()))
        return stored.model_copy()

    def _update_preferences(
        self,
        event: InteractionRecord,
        creator_id: str,
        hashtags: Sequence[str],
    ) -> None:
        prefs = self._preferences
        if event.liked or event.completion_rate > self.config.favorite_completion_threshold:
            if creator_id:
                prefs.favorite_creators.add(creator_id)
            prefs.favorite_hashtags.update(tag.lower().lstrip("#") for tag in hashtags if tag)

        watched = [r for r in self._interactions if r.watched]
        total_watch = sum(r.watch_time_seconds for r in watched)
        prefs.avg_watch_time_seconds = total_watch / len(watched) if watched else 0.0
        prefs.total_items_watched = len(watched)

    def clear(self) -> None:
        """Reset to empty and delete the persisted keys."""
        self._interactions = []
        self._preferences = PreferenceProfile()
        self._schedule(self._remove())

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def preferences(self) -> PreferenceProfile:
        return self._preferences.model_copy(deep=True)

    def interactions(self) -> List[InteractionRecord]:
        return [r.model_copy() for r in self._interactions]

    def get_interaction(self, item_id: str) -> Optional[InteractionRecord]:
        for r in self._interactions:
            if r.item_id == item_id:
                return r.model_copy()
        return None

    def has_seen(self, item_id: str) -> bool:
        return any(r.item_id == item_id for r in self._interactions)
