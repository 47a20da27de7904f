"""
Text helpers — hashtag extraction and id ordinals.
"""

import re
from typing import List

_HASHTAG_RE = re.compile(r"#(\w+)")
_NON_DIGIT_RE = re.compile(r"\D")


def extract_hashtags(description: str) -> List[str]:
    """Lowercased hashtags (without '#') in order of appearance."""
    if not description:
        return []
    return [tag.lower() for tag in _HASHTAG_RE.findall(description)]


def id_ordinal(item_id: str) -> int:
    """Integer formed by the digits of an id, 0 when it has none."""
    digits = _NON_DIGIT_RE.sub("", item_id or "")
    return int(digits) if digits else 0
