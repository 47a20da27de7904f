"""
Feed configuration — queue, store, and scoring parameters.

FeedConfig defaults are defined here. Callers may pass a dict (e.g. loaded from
a JSON file named by FEEDRANK_CONFIG_PATH); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class FeedConfig(BaseModel):
    """Configuration for the feed queue, interaction store and scoring engine."""

    # -------------------------------------------------------------------------
    # Queue
    # -------------------------------------------------------------------------

    # Items requested per prefetch. initialize() requests twice this many.
    batch_size: int = 10

    # Prefetch is triggered when (queue length - cursor) drops to this value.
    prefetch_threshold: int = 3

    # Number of items exposed past the cursor by visible_window().
    lookahead: int = 5

    # Items before the cursor handed to the engine as the recent window.
    recent_window_size: int = 5

    # -------------------------------------------------------------------------
    # Interaction store
    # -------------------------------------------------------------------------

    # Max interaction records kept, newest first.
    max_interactions: int = 200

    interactions_key: str = "@user_interactions"
    preferences_key: str = "@user_preferences"

    # Completion rate (0-100) above which a view counts as a positive signal.
    favorite_completion_threshold: float = 75.0

    # Completion rate below which a prior view counts as skipped.
    skip_completion_threshold: float = 50.0

    # -------------------------------------------------------------------------
    # Recommendation mix
    # -------------------------------------------------------------------------

    # Share of each batch drawn from unseen items; the rest comes from seen items.
    unseen_share: float = 0.8

    # Items at the tail of recently_shown that are excluded from candidates.
    recent_exclusion_size: int = 5

    # -------------------------------------------------------------------------
    # Blended score weights
    # score = engagement * w_e + virality * w_v + creator * w_c + content * w_ct + recency * w_r
    #         + diversity_penalty + history_adjustment
    # -------------------------------------------------------------------------

    weight_engagement: float = 2.0
    weight_virality: float = 0.3
    weight_creator: float = 0.5
    weight_content: float = 0.6
    weight_recency: float = 0.2

    # Weighted engagement term cap.
    engagement_cap: float = 40.0

    # -------------------------------------------------------------------------
    # Affinity and adjustment constants
    # -------------------------------------------------------------------------

    favorite_creator_bonus: float = 50.0
    # followers / follower_tier_size, capped at max_follower_tier, times follower_tier_points
    follower_tier_size: int = 1_000_000
    max_follower_tier: float = 5.0
    follower_tier_points: float = 5.0

    hashtag_match_points: float = 15.0
    # Per positively-completed interaction on another item, capped.
    completed_interaction_points: float = 5.0
    completed_interaction_cap: float = 30.0

    # recency = ordinal / recency_ordinal_scale * 100, capped at 100
    recency_ordinal_scale: int = 1000

    same_creator_penalty: float = -40.0
    same_creator_min_count: int = 2
    hashtag_overlap_penalty: float = -20.0
    hashtag_overlap_min: int = 2

    skipped_penalty: float = -50.0
    liked_bonus: float = 30.0

    @model_validator(mode="after")
    def check_ranges(self):
        if not 0.0 <= self.unseen_share <= 1.0:
            raise ValueError(f"unseen_share must be within [0, 1], got {self.unseen_share}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.lookahead < 1:
            raise ValueError(f"lookahead must be positive, got {self.lookahead}")
        if self.prefetch_threshold < 0:
            raise ValueError(
                f"prefetch_threshold must not be negative, got {self.prefetch_threshold}"
            )
        if self.max_interactions < 1:
            raise ValueError(f"max_interactions must be positive, got {self.max_interactions}")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "FeedConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        for section in ("queue", "store", "scoring"):
            if section in config_dict:
                flat.update(config_dict[section])
        if "weights" in config_dict:
            for name, value in config_dict["weights"].items():
                flat[f"weight_{name}"] = value
        for k, v in config_dict.items():
            if not isinstance(v, dict):
                flat[k] = v
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = FeedConfig()


def resolve_config(config: Optional["FeedConfig"]) -> "FeedConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
