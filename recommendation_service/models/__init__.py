"""
Models package for article records and reader preferences.
"""

from .article import (
    Article,
    ArticleRecord,
    Engagement,
    UserPreferences,
    coerce_datetime,
    index_by_id,
    normalize_tags,
    parse_article,
    parse_articles,
    parse_preferences,
)

__all__ = [
    "Article",
    "ArticleRecord",
    "Engagement",
    "UserPreferences",
    "coerce_datetime",
    "index_by_id",
    "normalize_tags",
    "parse_article",
    "parse_articles",
    "parse_preferences",
]
