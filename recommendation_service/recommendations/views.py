"""
Convenience views built on the signal scorers.

Simpler rankings than the composite engine: popularity only, recency only,
related-to-an-article and a preference-driven personal mix. None of them
mutate the list they are given; all sorts are stable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Tuple, Union
import logging

from ..models import (
    Article,
    ArticleRecord,
    UserPreferences,
    coerce_datetime,
    parse_article,
    parse_articles,
    parse_preferences,
)
from .signals import (
    calculate_content_similarity,
    calculate_freshness_score,
    calculate_popularity_score,
    calculate_relevance_score,
    ensure_limit,
)

logger = logging.getLogger(__name__)

RELATED_SIMILARITY_WEIGHT = 0.5

PERSONAL_TAG_WEIGHT = 0.4
PERSONAL_READING_TIME_WEIGHT = 0.2
PERSONAL_CATEGORY_WEIGHT = 0.3
PERSONAL_FRESHNESS_WEIGHT = 0.1
READING_TIME_WINDOW_MINUTES = 20


def _top(scored: List[Tuple[Article, float]], limit: int) -> List[Article]:
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)
    return [article for article, _ in ranked[:limit]]


def get_popular_posts(articles: Iterable[ArticleRecord], limit: int = 5) -> List[Article]:
    """Most engaged articles first."""
    ensure_limit(limit)
    return _top([(article, calculate_popularity_score(article)) for article in parse_articles(articles)], limit)


def get_latest_posts(articles: Iterable[ArticleRecord], limit: int = 5) -> List[Article]:
    """Newest articles first."""
    ensure_limit(limit)
    ranked = sorted(parse_articles(articles), key=lambda article: article.publish_date, reverse=True)
    return ranked[:limit]


def score_related(candidate: Article, target: Article) -> float:
    return (
        calculate_relevance_score(candidate.tags, current_tags=target.tags)
        + calculate_content_similarity(candidate.content, target.content) * RELATED_SIMILARITY_WEIGHT
    )


def get_related_posts(
    articles: Iterable[ArticleRecord],
    target: ArticleRecord,
    limit: int = 5,
) -> List[Article]:
    """Articles closest to ``target`` by tags plus half-weighted content similarity."""
    ensure_limit(limit)
    target = parse_article(target)
    scored = [
        (article, score_related(article, target))
        for article in parse_articles(articles)
        if article.id != target.id
    ]
    return _top(scored, limit)


def reading_time_closeness(minutes: Optional[float], preferred: Optional[float]) -> float:
    """Linear falloff from 1 to 0 across a 20-minute difference."""
    if not minutes or not preferred:
        return 0.0
    return max(0.0, 1 - abs(minutes - preferred) / READING_TIME_WINDOW_MINUTES)


def score_personalized(article: Article, preferences: UserPreferences, now: datetime) -> float:
    score = calculate_relevance_score(article.tags, preferences.liked_tags) * PERSONAL_TAG_WEIGHT
    score += (
        reading_time_closeness(article.reading_time_minutes, preferences.preferred_reading_time)
        * PERSONAL_READING_TIME_WEIGHT
    )
    if preferences.preferred_categories and article.category:
        if article.category in preferences.preferred_categories:
            score += PERSONAL_CATEGORY_WEIGHT
    score += calculate_freshness_score(article.publish_date, now=now) * PERSONAL_FRESHNESS_WEIGHT
    return score


def get_personalized_recommendations(
    articles: Iterable[ArticleRecord],
    preferences: Union[UserPreferences, Mapping, None],
    limit: int = 6,
    now: Optional[datetime] = None,
) -> List[Article]:
    """Unread articles ranked by the reader's demonstrated preferences.

    Already viewed articles are never returned. Unknown viewed ids are ignored.
    """
    ensure_limit(limit)
    preferences = parse_preferences(preferences)
    now = coerce_datetime(now) if now is not None else datetime.now(timezone.utc)
    viewed = set(preferences.viewed_posts)

    scored = [
        (article, score_personalized(article, preferences, now))
        for article in parse_articles(articles)
        if article.id not in viewed
    ]
    logger.debug("Scored %d unread articles for personalization", len(scored))
    return _top(scored, limit)
