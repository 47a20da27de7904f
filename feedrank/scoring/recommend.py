"""
Personalized recommendation: partition, score, mix, and backfill.

Unseen items fill unseen_share of each batch, previously seen items the rest.
All sorts are stable so equal scores keep catalog order.
"""

import logging
import math
from typing import List, Sequence

from ..models.config import DEFAULT_CONFIG, FeedConfig
from ..models.interaction import InteractionRecord, PreferenceProfile
from ..models.item import Item
from ..models.scoring import ScoredItem
from .core import score_item

logger = logging.getLogger(__name__)


def _unique_by_id(items: Sequence[Item]) -> List[Item]:
    """First occurrence of each id, catalog order preserved."""
    seen = set()
    out = []
    for it in items:
        if it.id in seen:
            continue
        seen.add(it.id)
        out.append(it)
    return out


def _score_all(
    items: List[Item],
    preferences: PreferenceProfile,
    interactions: Sequence[InteractionRecord],
    recently_shown: Sequence[Item],
    config: FeedConfig,
) -> List[ScoredItem]:
    scored = [
        ScoredItem(
            item=it,
            result=score_item(it, preferences, interactions, recently_shown, config),
        )
        for it in items
    ]
    # sorted() is stable with reverse=True: ties keep catalog order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_candidates(
    catalog: Sequence[Item],
    preferences: PreferenceProfile,
    interactions: Sequence[InteractionRecord],
    recently_shown: Sequence[Item],
    count: int,
    config: FeedConfig = DEFAULT_CONFIG,
) -> List[ScoredItem]:
    """
    Select up to count scored items for a viewer.

    1) Drop the last recent_exclusion_size recently shown items.
    2) Split the rest into unseen/seen by interaction history; score and sort each.
    3) Take ceil(count * unseen_share) unseen and the remainder seen; merge and re-sort.
    4) Backfill from the catalog (catalog order) when short.
    """
    if count <= 0:
        return []

    catalog = _unique_by_id(catalog)
    seen_ids = {rec.item_id for rec in interactions}
    tail = list(recently_shown)[-config.recent_exclusion_size:] if config.recent_exclusion_size else []
    recent_ids = {it.id for it in tail}

    candidates = [it for it in catalog if it.id not in recent_ids]
    unseen = [it for it in candidates if it.id not in seen_ids]
    seen = [it for it in candidates if it.id in seen_ids]

    scored_unseen = _score_all(unseen, preferences, interactions, recently_shown, config)
    scored_seen = _score_all(seen, preferences, interactions, recently_shown, config)

    unseen_count = math.ceil(count * config.unseen_share)
    seen_count = count - unseen_count
    selection = sorted(
        scored_unseen[:unseen_count] + scored_seen[:seen_count],
        key=lambda s: s.score,
        reverse=True,
    )[:count]

    for s in selection:
        logger.debug(
            "[ranking] %s (%s) score=%.1f reasons=%s",
            s.item.id, s.item.creator.username or s.item.creator_id, s.score,
            ", ".join(s.result.reasons),
        )

    if len(selection) < count:
        included = {s.item.id for s in selection}
        for it in catalog:
            if len(selection) >= count:
                break
            if it.id in included:
                continue
            selection.append(
                ScoredItem(
                    item=it,
                    result=score_item(it, preferences, interactions, recently_shown, config),
                )
            )
            included.add(it.id)

    return selection


def recommend(
    catalog: Sequence[Item],
    preferences: PreferenceProfile,
    interactions: Sequence[InteractionRecord],
    recently_shown: Sequence[Item],
    count: int = 10,
    config: FeedConfig = DEFAULT_CONFIG,
) -> List[Item]:
    """Ordered, duplicate-free list of up to count items (fewer only if the catalog is smaller)."""
    logger.info(
        "[ranking] recommend: catalog=%s interactions=%s favorite_creators=%s favorite_hashtags=%s",
        len(catalog), len(interactions),
        len(preferences.favorite_creators), len(preferences.favorite_hashtags),
    )
    ranked = rank_candidates(
        catalog, preferences, interactions, recently_shown, count, config
    )
    return [s.item for s in ranked]
