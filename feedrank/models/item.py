"""
Item model — typed representation of a catalog video for the ranking pipeline.

Used by scoring, recommendation, and the feed queue instead of raw dicts.
Built from catalog dicts via Item.model_validate(d) or ensure_items().
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..utils.hashtags import extract_hashtags

logger = logging.getLogger(__name__)


class Creator(BaseModel):
    """Creator of an item. Only id and followers feed the score."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    username: str = ""
    followers: int = 0

    @field_validator("id", "username", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("followers", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return 0 if v is None else v


class Item(BaseModel):
    """
    Catalog item used across the scoring and queue stages.

    All fields except id are optional so partial catalog entries still score
    (missing or null signals contribute zero).
    """

    model_config = ConfigDict(extra="allow")

    id: str
    creator: Creator = Field(default_factory=Creator)
    description: str = ""
    likes: int = 0
    comments: int = 0
    shares: int = 0
    media_url: Optional[str] = None

    @field_validator("likes", "comments", "shares", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator("description", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("creator", mode="before")
    @classmethod
    def none_as_unknown_creator(cls, v):
        return {} if v is None else v

    @property
    def creator_id(self) -> str:
        return self.creator.id

    @property
    def hashtags(self) -> List[str]:
        """Lowercased hashtags parsed from the description."""
        return extract_hashtags(self.description)

    @property
    def views(self) -> int:
        """Estimated views; the catalog carries no view counter."""
        return max(self.likes * 10, 1000)


def ensure_items(items: Iterable[Union[Dict[str, Any], "Item"]]) -> List["Item"]:
    """
    Convert list of dicts or Items to list of Item models for use in the pipeline.

    Entries that still fail validation (no id, non-numeric counters) are
    skipped with a warning.
    """
    out: List[Item] = []
    for it in items:
        if isinstance(it, Item):
            out.append(it)
            continue
        try:
            out.append(Item.model_validate(it))
        except ValidationError as e:
            logger.warning("[catalog] skipping malformed item: %s", e.errors()[0].get("msg"))
    return out
