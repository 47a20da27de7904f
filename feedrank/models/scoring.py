"""
Scoring models — per-item score results produced by the ranking stage.

Transient: recomputed on every ranking call and never persisted.
"""

from typing import List

from pydantic import BaseModel, Field

from .item import Item

DISCOVER_REASON = "Discover new content"


class ScoreResult(BaseModel):
    """Score and human-readable reasons for one item."""

    item_id: str
    score: float = Field(ge=0.0)
    reasons: List[str] = Field(default_factory=lambda: [DISCOVER_REASON])


class ScoredItem(BaseModel):
    """An item with its score result."""

    item: Item
    result: ScoreResult

    @property
    def score(self) -> float:
        return self.result.score
