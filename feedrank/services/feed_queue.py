"""
Feed queue: the cursor-addressed, append-only item sequence shown to one viewer.

States: UNINITIALIZED -> READY <-> REFRESHING. Consumed entries are never
compacted; only refresh_feed() or clear() reset the list and cursor. Prefetch
runs as a background task with a single-flight guard (held task + refreshing
flag) and scoring runs in a worker thread, so visible_window() stays readable
while a prefetch is outstanding.
"""

import asyncio
import enum
import logging
from typing import Iterable, List, Optional, Union

from ..models.config import FeedConfig, resolve_config
from ..models.item import Item, ensure_items
from ..scoring.engine import ScoringEngine
from .interaction_store import InteractionStore

logger = logging.getLogger(__name__)


class QueueStatus(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    REFRESHING = "refreshing"


class FeedQueue:
    def __init__(
        self,
        catalog: Iterable[Union[dict, Item]],
        engine: ScoringEngine,
        store: InteractionStore,
        config: Optional[FeedConfig] = None,
    ):
        self.config = resolve_config(config)
        self._catalog: List[Item] = ensure_items(catalog)
        self._engine = engine
        self._store = store
        self._items: List[Item] = []
        self._cursor = 0
        self._initialized = False
        self._refreshing = False
        self._resetting = False
        self._prefetch_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def prefetch_threshold(self) -> int:
        return self.config.prefetch_threshold

    @property
    def batch_size(self) -> int:
        return self.config.batch_size

    @property
    def is_refreshing(self) -> bool:
        """True while a prefetch is held (scheduled or running) or a refresh is rebuilding."""
        held = self._prefetch_task is not None and not self._prefetch_task.done()
        return self._refreshing or self._resetting or held

    @property
    def status(self) -> QueueStatus:
        if self.is_refreshing:
            return QueueStatus.REFRESHING
        if not self._initialized:
            return QueueStatus.UNINITIALIZED
        return QueueStatus.READY

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> List[Item]:
        return list(self._items)

    def catalog(self) -> List[Item]:
        return list(self._catalog)

    def visible_window(self) -> List[Item]:
        """Items up to lookahead entries past the cursor."""
        return self._items[: self._cursor + self.config.lookahead]

    def current_item(self) -> Optional[Item]:
        if 0 <= self._cursor < len(self._items):
            return self._items[self._cursor]
        return None

    def _queued_ids(self) -> set:
        return {it.id for it in self._items}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> List[Item]:
        """Build the first 2 * batch_size items (cold-start or personalized) and reset the cursor."""
        preferences = self._store.preferences()
        count = self.config.batch_size * 2
        catalog = list(self._catalog)

        if preferences.total_items_watched == 0:
            logger.info("[queue] new viewer: building initial feed")
            items = await asyncio.to_thread(self._engine.initial_feed, catalog, count)
        else:
            logger.info("[queue] returning viewer: building personalized feed")
            interactions = self._store.interactions()
            items = await asyncio.to_thread(
                self._engine.recommend, catalog, preferences, interactions, [], count
            )

        self._items = list(items)
        self._cursor = 0
        self._initialized = True
        logger.info("[queue] initialized with %s items", len(self._items))
        return self.visible_window()

    async def refresh_feed(self) -> List[Item]:
        """
        Reset cursor and items, then initialize again.

        An outstanding prefetch is not cancelled and can still append into the
        rebuilt queue (ids stay unique; items may come from the old generation).
        """
        logger.info("[queue] refreshing feed")
        self._resetting = True
        try:
            self._cursor = 0
            self._items = []
            return await self.initialize()
        finally:
            self._resetting = False

    def clear(self) -> None:
        """
        Drop the queue on logout; the queue returns to UNINITIALIZED.

        A held prefetch is cancelled so it cannot append into the dropped queue.
        Await stop_prefetch() first to also wait for its cancellation.
        """
        if self._prefetch_task is not None and not self._prefetch_task.done():
            logger.info("[queue] cancelling in-flight prefetch")
            self._prefetch_task.cancel()
        self._prefetch_task = None
        self._refreshing = False
        self._items = []
        self._cursor = 0
        self._initialized = False

    async def stop_prefetch(self) -> None:
        """Cancel a held prefetch task and wait until it has finished."""
        task = self._prefetch_task
        if task is None:
            return
        if not task.done():
            task.cancel()
            await asyncio.wait({task})
        self._prefetch_task = None

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    async def advance(self) -> Optional[asyncio.Task]:
        """
        Move the cursor forward by one.

        When remaining items drop to prefetch_threshold and no prefetch is held,
        schedules prefetch_more() and returns its task without awaiting it.
        Does nothing on an uninitialized queue.
        """
        if not self._initialized:
            logger.debug("[queue] advance on uninitialized queue ignored")
            return None
        self._cursor += 1
        remaining = len(self._items) - self._cursor
        logger.debug("[queue] moved to item %s/%s", self._cursor + 1, len(self._items))

        if remaining <= self.config.prefetch_threshold and not self.is_refreshing:
            logger.info("[queue] %s items remaining, prefetching", remaining)
            self._prefetch_task = asyncio.create_task(self.prefetch_more())
            return self._prefetch_task
        return None

    async def prefetch_more(self) -> int:
        """
        Append up to batch_size new items; returns how many were appended.

        Errors are logged and leave the queue unchanged; the refreshing flag is
        always released.
        """
        if self._refreshing:
            logger.info("[queue] already refreshing, skipping prefetch")
            return 0

        self._refreshing = True
        try:
            preferences = self._store.preferences()
            interactions = self._store.interactions()
            start = max(0, self._cursor - self.config.recent_window_size)
            recent = self._items[start: self._cursor]
            catalog = list(self._catalog)

            candidates = await asyncio.to_thread(
                self._engine.recommend,
                catalog, preferences, interactions, recent, self.config.batch_size,
            )

            queued = self._queued_ids()
            fresh = [it for it in candidates if it.id not in queued]
            if fresh:
                self._items.extend(fresh)
                logger.info("[queue] added %s new items", len(fresh))
                return len(fresh)

            logger.info("[queue] no new unique items, adding fallback items")
            fallback = []
            for it in self._catalog:
                if len(fallback) >= self.config.batch_size:
                    break
                if it.id not in queued:
                    fallback.append(it)
                    queued.add(it.id)
            self._items.extend(fallback)
            return len(fallback)
        except Exception as e:
            logger.error("[queue] prefetch failed: %s: %s", type(e).__name__, e)
            return 0
        finally:
            self._refreshing = False

    # ------------------------------------------------------------------
    # Catalog updates
    # ------------------------------------------------------------------

    def update_catalog(self, catalog: Iterable[Union[dict, Item]]) -> None:
        """Replace the pool for future scoring; queued items are untouched."""
        logger.info("[queue] updating catalog")
        self._catalog = ensure_items(catalog)

    def insert_new(self, item: Union[dict, Item]) -> None:
        """
        Prepend a freshly uploaded item to the queue and the catalog.

        The cursor moves forward by one so it keeps pointing at the same entry.
        No check is made against an outstanding prefetch.
        """
        converted = ensure_items([item])
        if not converted:
            return
        item = converted[0]
        if item.id in self._queued_ids():
            logger.warning("[queue] item %s already queued, not inserting", item.id)
            return
        logger.info("[queue] adding new item %s to top of queue", item.id)
        self._items.insert(0, item)
        self._cursor += 1
        self._catalog.insert(0, item)

    def replace_item(self, item: Item) -> bool:
        """Swap in an updated copy of an item (same id) in queue and catalog, keeping positions."""
        replaced = False
        for seq in (self._items, self._catalog):
            for idx, existing in enumerate(seq):
                if existing.id == item.id:
                    seq[idx] = item
                    replaced = True
        return replaced
