"""Shared fixtures: item factory, a 40-item catalog, stores with a fixed clock."""

from datetime import datetime, timezone

import pytest

from feedrank import Creator, FeedConfig, InMemoryKeyValueStore, InteractionStore, Item

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

TOPICS = ["#dance #music", "#food #cooking", "#travel #nature", "#tech #gadgets", "#fitness"]


def _make_item(
    item_id: str,
    creator: str = "c1",
    likes: int = 0,
    comments: int = 0,
    shares: int = 0,
    followers: int = 0,
    description: str = "",
) -> Item:
    return Item(
        id=item_id,
        creator=Creator(id=creator, username=creator, followers=followers),
        description=description,
        likes=likes,
        comments=comments,
        shares=shares,
    )


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def catalog():
    """40 items over 8 creators; popularity grows with the index."""
    return [
        _make_item(
            f"v{i}",
            creator=f"c{i % 8}",
            likes=i * 1000,
            comments=i * 10,
            shares=i * 5,
            followers=i * 50_000,
            description=f"Clip {i} {TOPICS[i % len(TOPICS)]}",
        )
        for i in range(1, 41)
    ]


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def config():
    return FeedConfig()


@pytest.fixture
def store(kv, config):
    return InteractionStore(kv, config, clock=lambda: FIXED_TIME)
