"""
Per-item sub-signals: engagement, virality, creator and content affinity, recency,
diversity penalty.

Each function returns the raw (unweighted) value; core.score_item applies weights.
Missing counters or descriptions contribute zero.
"""

from typing import List, Sequence

from ..models.config import FeedConfig
from ..models.interaction import InteractionRecord, PreferenceProfile
from ..models.item import Item
from ..utils.hashtags import id_ordinal


def engagement_rate(item: Item) -> float:
    """(likes + comments + shares) / views * 100."""
    total = item.likes + item.comments + item.shares
    return total / item.views * 100


def virality_score(item: Item) -> float:
    """Capped likes/comments/shares terms plus the raw engagement rate."""
    likes_term = min(item.likes / 100_000 * 20, 40)
    comments_term = min(item.comments / 1000 * 20, 30)
    shares_term = min(item.shares / 500 * 30, 30)
    return likes_term + comments_term + shares_term + engagement_rate(item)


def creator_score(item: Item, preferences: PreferenceProfile, config: FeedConfig) -> float:
    """Favorite-creator bonus plus follower tier, capped at 100."""
    score = 0.0
    if item.creator_id in preferences.favorite_creators:
        score += config.favorite_creator_bonus
    follower_tier = min(item.creator.followers / config.follower_tier_size, config.max_follower_tier)
    score += follower_tier * config.follower_tier_points
    return min(score, 100.0)


def content_score(
    item: Item,
    preferences: PreferenceProfile,
    interactions: Sequence[InteractionRecord],
    config: FeedConfig,
) -> float:
    """Hashtag matches against favorites plus credit for completed views elsewhere, capped at 100."""
    matching = sum(1 for tag in item.hashtags if tag in preferences.favorite_hashtags)
    score = matching * config.hashtag_match_points

    completed_elsewhere = sum(
        1
        for rec in interactions
        if rec.completion_rate > config.favorite_completion_threshold and rec.item_id != item.id
    )
    if completed_elsewhere > 0:
        score += min(
            completed_elsewhere * config.completed_interaction_points,
            config.completed_interaction_cap,
        )
    return min(score, 100.0)


def recency_score(item: Item, config: FeedConfig) -> float:
    """Id ordinal scaled to 0-100; higher ids are newer uploads."""
    return min(id_ordinal(item.id) / config.recency_ordinal_scale * 100, 100.0)


def diversity_penalty(item: Item, recent_items: List[Item], config: FeedConfig) -> float:
    """
    Negative adjustment for repeating a creator or topic from the recent window.

    Same creator at least same_creator_min_count times wins over hashtag overlap.
    """
    if not recent_items:
        return 0.0

    same_creator = sum(1 for r in recent_items if r.creator_id == item.creator_id)
    if same_creator >= config.same_creator_min_count:
        return config.same_creator_penalty

    recent_tags = {tag for r in recent_items for tag in r.hashtags}
    overlap = sum(1 for tag in item.hashtags if tag in recent_tags)
    if overlap > config.hashtag_overlap_min:
        return config.hashtag_overlap_penalty
    return 0.0
