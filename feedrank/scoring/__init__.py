"""
Ranking: blend engagement, virality, affinity, recency and diversity into ordered feeds.

Public API: score_item, rank_candidates, recommend, initial_feed, ScoringEngine.
- signals: raw sub-scores.
- core: weighted per-item score and reasons.
- recommend: unseen/seen mix with backfill.
- cold_start: popularity feed with creator spread.
"""

from .cold_start import initial_feed, popularity_score
from .core import score_item
from .engine import ScoringEngine
from .recommend import rank_candidates, recommend

__all__ = [
    "ScoringEngine",
    "initial_feed",
    "popularity_score",
    "rank_candidates",
    "recommend",
    "score_item",
]
