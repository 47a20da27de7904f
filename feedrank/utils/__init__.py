"""Shared utilities for hashtag and id parsing."""

from .hashtags import extract_hashtags, id_ordinal

__all__ = [
    "extract_hashtags",
    "id_ordinal",
]
