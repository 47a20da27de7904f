"""
Blended per-item scoring: weights the sub-signals and collects reasons.

score = engagement * w_e + virality * w_v + creator * w_c + content * w_ct + recency * w_r
        + diversity_penalty + history_adjustment, floored at 0.
"""

from typing import List, Optional, Sequence

from ..models.config import DEFAULT_CONFIG, FeedConfig
from ..models.interaction import InteractionRecord, PreferenceProfile
from ..models.item import Item
from ..models.scoring import DISCOVER_REASON, ScoreResult
from .signals import (
    content_score,
    creator_score,
    diversity_penalty,
    engagement_rate,
    recency_score,
    virality_score,
)


def _find_interaction(
    item_id: str,
    interactions: Sequence[InteractionRecord],
) -> Optional[InteractionRecord]:
    for rec in interactions:
        if rec.item_id == item_id:
            return rec
    return None


def _history_adjustment(
    interaction: Optional[InteractionRecord],
    config: FeedConfig,
) -> tuple[float, Optional[str]]:
    """Penalty for a previously skipped item, otherwise bonus for a liked one."""
    if interaction is None:
        return 0.0, None
    if interaction.completion_rate < config.skip_completion_threshold:
        return config.skipped_penalty, "Previously skipped"
    if interaction.liked:
        return config.liked_bonus, "You liked this"
    return 0.0, None


def score_item(
    item: Item,
    preferences: PreferenceProfile,
    interactions: Sequence[InteractionRecord],
    recent_items: Sequence[Item],
    config: FeedConfig = DEFAULT_CONFIG,
) -> ScoreResult:
    """
    Score one item for a viewer.

    Reasons are appended in signal order when a signal crosses its threshold;
    an item with no qualifying reason gets ["Discover new content"].
    """
    reasons: List[str] = []
    total = 0.0

    rate = engagement_rate(item)
    engagement = min(rate * config.weight_engagement, config.engagement_cap)
    total += engagement
    if engagement > 20:
        reasons.append(f"High engagement ({rate:.1f}%)")

    virality = virality_score(item)
    total += virality * config.weight_virality
    if virality > 50:
        reasons.append("Trending content")

    total += creator_score(item, preferences, config) * config.weight_creator
    if item.creator_id in preferences.favorite_creators:
        reasons.append("From creator you like")

    content = content_score(item, preferences, interactions, config)
    total += content * config.weight_content
    if content > 40:
        reasons.append("Matches your interests")

    total += recency_score(item, config) * config.weight_recency

    penalty = diversity_penalty(item, list(recent_items), config)
    total += penalty
    if penalty < -30:
        reasons.append("Diversity adjustment")

    adjustment, history_reason = _history_adjustment(
        _find_interaction(item.id, interactions), config
    )
    total += adjustment
    if history_reason:
        reasons.append(history_reason)

    return ScoreResult(
        item_id=item.id,
        score=max(total, 0.0),
        reasons=reasons or [DISCOVER_REASON],
    )
