"""
Feed Session Tests

End-to-end: login (cold start), viewing, logout, login again (personalized),
counter updates, uploads and clearing recommendation data.

Run:
----
    pytest tests/test_session.py -v
"""

import asyncio
import json
import threading

from feedrank import (
    FeedQueue,
    FeedSession,
    InMemoryKeyValueStore,
    InteractionStore,
    JsonFileKeyValueStore,
    QueueStatus,
    ScoringEngine,
    Settings,
    initial_feed,
    recommend,
)


class BlockingEngine(ScoringEngine):
    """recommend() waits for release to be set (runs in a worker thread)."""

    def __init__(self, config=None):
        super().__init__(config)
        self.release = threading.Event()

    def recommend(self, *args, **kwargs):
        self.release.wait(timeout=5)
        return super().recommend(*args, **kwargs)


def _ids(items):
    return [it.id for it in items]


class TestLifecycle:
    """start / teardown / start again."""

    def test_cold_then_warm_across_logins(self, catalog, tmp_path):
        path = tmp_path / "state" / "feed_state.json"

        async def first_login():
            session = await FeedSession.start(catalog, JsonFileKeyValueStore(path))
            items = session.queue.items()
            record = session.track_view("v40", 40, 40, liked=True)
            await session.advance()
            await session.teardown()
            return session, items, record

        session, items, record = asyncio.run(first_login())
        assert _ids(items) == _ids(initial_feed(catalog, 20))
        assert record.item_id == "v40" and record.liked
        assert session.queue.status == QueueStatus.UNINITIALIZED

        stored = json.loads(path.read_text())
        assert set(stored) == {"@user_interactions", "@user_preferences"}

        async def second_login():
            return await FeedSession.start(catalog, JsonFileKeyValueStore(path))

        again = asyncio.run(second_login())
        prefs = again.store.preferences()
        assert again.store.has_seen("v40")
        assert prefs.favorite_creators == {"c0"}
        assert prefs.favorite_hashtags == {"dance", "music"}
        expected = recommend(catalog, prefs, again.store.interactions(), [], 20)
        assert _ids(again.queue.items()) == _ids(expected)

    def test_from_settings(self, catalog, tmp_path):
        config_path = tmp_path / "feed.json"
        config_path.write_text(json.dumps({"queue": {"batch_size": 4, "lookahead": 3}}))
        settings = Settings(storage_path=tmp_path / "state.json", config_path=config_path)

        session = asyncio.run(FeedSession.from_settings(catalog, settings))

        assert session.config.batch_size == 4
        assert len(session.queue) == 8
        assert len(session.visible_window()) == 3


class TestPlayback:
    """track_view and feed operations forwarded through the session."""

    def _start(self, catalog, kv=None):
        return asyncio.run(FeedSession.start(catalog, kv or InMemoryKeyValueStore()))

    def test_unknown_item_is_ignored(self, catalog):
        session = self._start(catalog)
        assert session.track_view("nope", 10, 10) is None
        assert session.store.interactions() == []

    def test_track_view_resolves_creator_and_hashtags(self, catalog):
        session = self._start(catalog)
        # v11: creator c3, topics "#food #cooking"
        session.track_view("v11", 38, 40)
        prefs = session.store.preferences()
        assert prefs.favorite_creators == {"c3"}
        assert prefs.favorite_hashtags == {"food", "cooking"}

    def test_update_item_replaces_counters(self, catalog):
        session = self._start(catalog)
        target = session.queue.items()[0]
        updated = target.model_copy(update={"likes": target.likes + 1})

        assert session.update_item(updated) is True
        assert session.queue.items()[0].likes == target.likes + 1
        assert next(it for it in session.queue.catalog() if it.id == target.id).likes == target.likes + 1
        assert session.update_item({"id": "missing"}) is False

    def test_uploaded_item_can_be_tracked(self, catalog):
        session = self._start(catalog)
        session.insert_new({"id": "user_1715000000", "creator": {"id": "me"}, "description": "#Mine"})

        assert session.visible_window()[0].id == "user_1715000000"
        record = session.track_view("user_1715000000", 20, 20)
        assert record.completion_rate == 100.0
        assert session.store.preferences().favorite_hashtags == {"mine"}

    def test_clear_recommendation_data(self, catalog):
        kv = InMemoryKeyValueStore()

        async def scenario():
            session = await FeedSession.start(catalog, kv)
            session.track_view("v3", 40, 40, liked=True)
            await session.refresh_feed()
            personalized = session.queue.items()
            await session.clear_recommendation_data()
            return session, personalized

        session, personalized = asyncio.run(scenario())
        assert kv.snapshot() == {}
        assert session.store.interactions() == []
        assert session.store.preferences().is_cold_start
        assert _ids(session.queue.items()) == _ids(initial_feed(catalog, 20))
        assert session.queue.cursor == 0
        assert len(personalized) == 20

    def test_teardown_stops_in_flight_prefetch(self, catalog, config):
        engine = BlockingEngine(config)
        store = InteractionStore(InMemoryKeyValueStore(), config)
        queue = FeedQueue(catalog, engine, store, config)
        session = FeedSession(engine, store, queue, config)

        async def scenario():
            await queue.initialize()
            while queue.cursor < 16:
                await session.advance()
            task = await session.advance()
            await asyncio.sleep(0)
            await session.teardown()
            after_teardown = (len(queue), queue.status)
            engine.release.set()
            return task, after_teardown

        task, after_teardown = asyncio.run(scenario())
        assert after_teardown == (0, QueueStatus.UNINITIALIZED)
        assert task.cancelled()
        assert len(queue) == 0
        assert queue.status == QueueStatus.UNINITIALIZED
