"""Viewer session: owns the scoring engine, interaction store and feed queue for one login."""

import asyncio
import logging
from typing import Iterable, List, Optional, Union

from .models.config import FeedConfig, resolve_config
from .models.interaction import InteractionRecord
from .models.item import Item, ensure_items
from .scoring.engine import ScoringEngine
from .services.feed_queue import FeedQueue
from .services.interaction_store import InteractionStore
from .services.kv_store import KeyValueStore
from .settings import Settings, create_kv_store, load_feed_config

logger = logging.getLogger(__name__)


class FeedSession:
    """
    Session-scoped owner of the ranking services.

    Built once at login with start(), discarded at logout after teardown().
    UI and playback collaborators talk to the session; it forwards to the
    queue and the store.
    """

    def __init__(
        self,
        engine: ScoringEngine,
        store: InteractionStore,
        queue: FeedQueue,
        config: FeedConfig,
    ):
        self.config = config
        self.engine = engine
        self.store = store
        self.queue = queue

    @classmethod
    async def start(
        cls,
        catalog: Iterable[Union[dict, Item]],
        kv_store: Optional[KeyValueStore] = None,
        config: Optional[FeedConfig] = None,
    ) -> "FeedSession":
        """Load stored interactions and build the first feed."""
        config = resolve_config(config)
        engine = ScoringEngine(config)
        store = InteractionStore(kv_store, config)
        await store.load()
        queue = FeedQueue(catalog, engine, store, config)
        await queue.initialize()
        logger.info("[session] started: %s items queued", len(queue))
        return cls(engine, store, queue, config)

    @classmethod
    async def from_settings(
        cls,
        catalog: Iterable[Union[dict, Item]],
        settings: Settings,
    ) -> "FeedSession":
        return await cls.start(
            catalog,
            kv_store=create_kv_store(settings),
            config=load_feed_config(settings),
        )

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _find_item(self, item_id: str) -> Optional[Item]:
        for it in self.queue.catalog():
            if it.id == item_id:
                return it
        for it in self.queue.items():
            if it.id == item_id:
                return it
        return None

    def track_view(
        self,
        item_id: str,
        watch_time: float,
        duration: float,
        liked: bool = False,
        commented: bool = False,
        shared: bool = False,
    ) -> Optional[InteractionRecord]:
        """Record an end-of-view event, resolving creator and hashtags from the catalog."""
        item = self._find_item(item_id)
        if item is None:
            logger.debug("[session] track_view for unknown item %s ignored", item_id)
            return None
        return self.store.track_view(
            item_id,
            watch_time,
            duration,
            liked=liked,
            commented=commented,
            shared=shared,
            creator_id=item.creator_id,
            hashtags=item.hashtags,
        )

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------

    def visible_window(self) -> List[Item]:
        return self.queue.visible_window()

    async def advance(self) -> Optional[asyncio.Task]:
        return await self.queue.advance()

    async def refresh_feed(self) -> List[Item]:
        return await self.queue.refresh_feed()

    def insert_new(self, item: Union[dict, Item]) -> None:
        self.queue.insert_new(item)

    def update_catalog(self, catalog: Iterable[Union[dict, Item]]) -> None:
        self.queue.update_catalog(catalog)

    def update_item(self, item: Union[dict, Item]) -> bool:
        """Apply an external counter update (likes, comments, shares) to an item already known."""
        converted = ensure_items([item])
        return bool(converted) and self.queue.replace_item(converted[0])

    async def clear_recommendation_data(self) -> List[Item]:
        """Forget every interaction and rebuild the feed from cold start."""
        self.store.clear()
        await self.store.flush()
        return await self.queue.refresh_feed()

    async def teardown(self) -> None:
        """Stop any prefetch, flush pending saves and drop the queue (logout)."""
        await self.queue.stop_prefetch()
        await self.store.flush()
        self.queue.clear()
        logger.info("[session] torn down")
