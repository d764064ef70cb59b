"""
Signal scorers used by the recommendation engine.

Every scorer is a pure function returning a value in [0, 1], so they can be
reused by the composite ranker, the convenience views or any batch job.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Union
import math
import re

from ..exceptions import InvalidInput
from ..models import Article, Engagement, coerce_datetime, normalize_tags

FRESHNESS_WINDOW_DAYS = 30
DEFAULT_DECAY_FACTOR = 0.1

VIEW_WEIGHT = 0.1
LIKE_WEIGHT = 2.0
SHARE_WEIGHT = 5.0
POPULARITY_SATURATION = 1000

_WORD_RE = re.compile(r"\w+")


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def ensure_finite(value: float, name: str) -> float:
    """Reject NaN/inf and non-numeric values for weights and factors."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return float(value)


def ensure_limit(value: int, name: str = "limit") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f"{name} must be a non-negative integer, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Freshness
# ---------------------------------------------------------------------------


def calculate_freshness_score(
    publish_date: Union[datetime, date, str, None],
    decay_factor: float = DEFAULT_DECAY_FACTOR,
    now: Optional[datetime] = None,
) -> float:
    """Exponential decay over whole days elapsed, on a 30-day basis.

    A just-published (or future-dated) article scores 1.0.
    """
    decay_factor = ensure_finite(decay_factor, "decay_factor")
    published = coerce_datetime(publish_date)
    reference = coerce_datetime(now) if now is not None else datetime.now(timezone.utc)

    age_days = max((reference - published).days, 0)
    return clamp(math.exp(-decay_factor * age_days / FRESHNESS_WINDOW_DAYS))


# ---------------------------------------------------------------------------
# Popularity
# ---------------------------------------------------------------------------


def calculate_popularity_score(source: Union[Article, Engagement, None]) -> float:
    """Log-compressed weighted engagement; shares count most, views least."""
    if isinstance(source, Article):
        engagement = source.engagement
    else:
        engagement = source or Engagement()

    raw = (
        engagement.views * VIEW_WEIGHT
        + engagement.likes * LIKE_WEIGHT
        + engagement.shares * SHARE_WEIGHT
    )
    return clamp(math.log(raw + 1) / math.log(POPULARITY_SATURATION))


# ---------------------------------------------------------------------------
# Tag relevance
# ---------------------------------------------------------------------------


def reference_tags(*tag_groups: Iterable[str]) -> List[str]:
    """Case-insensitive union of several tag lists, in first-seen order.

    A bare string counts as a single tag.
    """
    merged: List[str] = []
    for group in tag_groups:
        if isinstance(group, str):
            group = [group]
        merged.extend(group or [])
    return normalize_tags(merged)


def _fuzzy_match(tag: str, reference: str) -> bool:
    # Substring containment either way, e.g. "js" matches "javascript".
    return tag in reference or reference in tag


def calculate_relevance_score(
    article_tags: Sequence[str],
    user_tags: Sequence[str] = (),
    current_tags: Sequence[str] = (),
) -> float:
    """Fraction of article tags that fuzzily match the reference tag set.

    Normalized by the larger of the two tag sets. Zero without reference tags.
    """
    references = [tag.lower() for tag in reference_tags(user_tags, current_tags)]
    if not references:
        return 0.0

    tags = [tag.lower() for tag in normalize_tags(article_tags)]
    matched = [tag for tag in tags if any(_fuzzy_match(tag, ref) for ref in references)]
    return clamp(len(matched) / max(len(tags), len(references)))


def exact_tag_matches(article_tags: Sequence[str], references: Sequence[str]) -> List[str]:
    """Article tags equal to a reference tag ignoring case, in article order."""
    wanted = {tag.lower() for tag in reference_tags(references)}
    return [tag for tag in normalize_tags(article_tags) if tag.lower() in wanted]


# ---------------------------------------------------------------------------
# Content similarity
# ---------------------------------------------------------------------------


def tokenize(text: Optional[str]) -> List[str]:
    return _WORD_RE.findall((text or "").lower())


def term_frequencies(text: Optional[str]) -> Dict[str, int]:
    return Counter(tokenize(text))


def calculate_content_similarity(text_a: Optional[str], text_b: Optional[str]) -> float:
    """Cosine similarity of bag-of-words term frequencies.

    No stemming and no stop words. Zero when either text has no tokens.
    """
    freq_a = term_frequencies(text_a)
    freq_b = term_frequencies(text_b)
    if not freq_a or not freq_b:
        return 0.0

    if len(freq_b) < len(freq_a):
        freq_a, freq_b = freq_b, freq_a
    dot = sum(count * freq_b.get(word, 0) for word, count in freq_a.items())
    norm_a = sum(count * count for count in freq_a.values())
    norm_b = sum(count * count for count in freq_b.values())

    # Integer norms keep sqrt(n * n) exact, so identical texts score exactly 1.
    return clamp(dot / math.sqrt(norm_a * norm_b))
