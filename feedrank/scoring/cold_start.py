"""
Cold-start feed for viewers with no interaction history.

Orders by popularity (virality + 2 * engagement rate) and spreads creators
across the first half of the feed.
"""

import logging
from typing import List, Sequence, Set

from ..models.item import Item
from .recommend import _unique_by_id
from .signals import engagement_rate, virality_score

logger = logging.getLogger(__name__)


def popularity_score(item: Item) -> float:
    return virality_score(item) + engagement_rate(item) * 2


def initial_feed(catalog: Sequence[Item], count: int = 10) -> List[Item]:
    """
    Build a creator-diverse popularity feed of up to count items.

    Greedy pass in score order skips creators already selected until the
    selection holds more than count / 2 items; a second pass backfills in
    score order. Deterministic for a given catalog and count.
    """
    if count <= 0:
        return []

    ranked = sorted(_unique_by_id(catalog), key=popularity_score, reverse=True)

    selected: List[Item] = []
    selected_ids: Set[str] = set()
    used_creators: Set[str] = set()
    for item in ranked:
        if len(selected) >= count:
            break
        if item.creator_id not in used_creators or len(selected) > count / 2:
            selected.append(item)
            selected_ids.add(item.id)
            used_creators.add(item.creator_id)

    if len(selected) < count:
        for item in ranked:
            if len(selected) >= count:
                break
            if item.id not in selected_ids:
                selected.append(item)
                selected_ids.add(item.id)

    logger.info("[ranking] initial feed generated: %s items", len(selected))
    return selected
