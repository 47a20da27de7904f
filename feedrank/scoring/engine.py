"""
ScoringEngine — thin stateless facade over score_item, recommend and initial_feed.

Holds only a FeedConfig so a session can pass one object to the feed queue.
Safe to call concurrently: nothing here mutates its arguments.
"""

from typing import List, Optional, Sequence

from ..models.config import FeedConfig, resolve_config
from ..models.interaction import InteractionRecord, PreferenceProfile
from ..models.item import Item
from ..models.scoring import ScoredItem, ScoreResult
from .cold_start import initial_feed
from .core import score_item
from .recommend import rank_candidates, recommend


class ScoringEngine:
    def __init__(self, config: Optional[FeedConfig] = None):
        self.config = resolve_config(config)

    def score(
        self,
        item: Item,
        preferences: PreferenceProfile,
        interactions: Sequence[InteractionRecord],
        recent_window: Sequence[Item] = (),
    ) -> ScoreResult:
        return score_item(item, preferences, interactions, recent_window, self.config)

    def rank(
        self,
        catalog: Sequence[Item],
        preferences: PreferenceProfile,
        interactions: Sequence[InteractionRecord],
        recently_shown: Sequence[Item],
        count: int,
    ) -> List[ScoredItem]:
        return rank_candidates(
            catalog, preferences, interactions, recently_shown, count, self.config
        )

    def recommend(
        self,
        catalog: Sequence[Item],
        preferences: PreferenceProfile,
        interactions: Sequence[InteractionRecord],
        recently_shown: Sequence[Item],
        count: int,
    ) -> List[Item]:
        return recommend(
            catalog, preferences, interactions, recently_shown, count, self.config
        )

    def initial_feed(self, catalog: Sequence[Item], count: int) -> List[Item]:
        return initial_feed(catalog, count)
