"""
Interaction models — per-item viewing outcomes and the preference profile derived from them.

InteractionRecord is unique per item_id within one viewer's history.
PreferenceProfile is recomputed by the interaction store on every tracked view.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Set, Union

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def completion_rate(watch_time: float, duration: float) -> float:
    """Percentage of duration watched, clamped to [0, 100]. Non-positive duration gives 0."""
    if not duration or duration <= 0:
        return 0.0
    return max(0.0, min(watch_time / duration * 100, 100.0))


class InteractionRecord(BaseModel):
    """
    Viewing outcome for one item.

    Repeated events for the same item merge: numeric fields keep the maximum,
    flags are OR-combined, last_updated never moves backwards.
    """

    model_config = ConfigDict(extra="ignore")

    item_id: str
    watched: bool = True
    watch_time_seconds: float = 0.0
    completion_rate: float = 0.0
    liked: bool = False
    commented: bool = False
    shared: bool = False
    last_updated: datetime = Field(default_factory=_utcnow)

    def merged_with(self, other: "InteractionRecord") -> "InteractionRecord":
        """Merge a newer event for the same item into this record."""
        return InteractionRecord(
            item_id=self.item_id,
            watched=self.watched or other.watched,
            watch_time_seconds=max(self.watch_time_seconds, other.watch_time_seconds),
            completion_rate=max(self.completion_rate, other.completion_rate),
            liked=self.liked or other.liked,
            commented=self.commented or other.commented,
            shared=self.shared or other.shared,
            last_updated=max(self.last_updated, other.last_updated),
        )


class PreferenceProfile(BaseModel):
    """Viewer preferences derived from interaction records."""

    favorite_creators: Set[str] = Field(default_factory=set)
    favorite_hashtags: Set[str] = Field(default_factory=set)
    # Stored and persisted; no scoring signal reads it.
    category_scores: Dict[str, float] = Field(default_factory=dict)
    avg_watch_time_seconds: float = 0.0
    total_items_watched: int = 0

    @property
    def is_cold_start(self) -> bool:
        return self.total_items_watched == 0


def ensure_interactions(
    records: Iterable[Union[Dict, "InteractionRecord"]],
) -> List["InteractionRecord"]:
    """Convert list of dicts or InteractionRecords to InteractionRecord models."""
    return [
        InteractionRecord.model_validate(r) if isinstance(r, dict) else r
        for r in records
    ]
