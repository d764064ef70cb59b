"""
Reason codes attached to recommendations and their display labels.
"""

from enum import Enum
from typing import Dict, Optional, Sequence

MAX_REASONS = 3


class ReasonCode(Enum):
    """Why an article was recommended."""

    FRESH = "fresh"
    POPULAR = "popular"
    RELATED = "related"
    SIMILAR_TOPIC = "similar_topic"
    TAG_MATCH = "tag_match"
    MODERATE_LENGTH = "moderate_length"


REASON_LABELS: Dict[str, Dict[ReasonCode, str]] = {
    "en": {
        ReasonCode.FRESH: "Recently published",
        ReasonCode.POPULAR: "Popular",
        ReasonCode.RELATED: "Related content",
        ReasonCode.SIMILAR_TOPIC: "Similar topic",
        ReasonCode.TAG_MATCH: "Related to {tags}",
        ReasonCode.MODERATE_LENGTH: "Moderate length",
    },
    "zh": {
        ReasonCode.FRESH: "最新发布",
        ReasonCode.POPULAR: "热门文章",
        ReasonCode.RELATED: "相关内容",
        ReasonCode.SIMILAR_TOPIC: "相似主题",
        ReasonCode.TAG_MATCH: "{tags} 相关",
        ReasonCode.MODERATE_LENGTH: "适中篇幅",
    },
}

DEFAULT_LOCALE = "en"


def format_reason(code: ReasonCode, locale: str = DEFAULT_LOCALE, tags: Optional[Sequence[str]] = None) -> str:
    """Render a reason code; unknown locales fall back to English."""
    labels = REASON_LABELS.get(locale) or REASON_LABELS[DEFAULT_LOCALE]
    return labels[code].format(tags=", ".join(tags or []))
