# Recommendation service package for article ranking

from .exceptions import InvalidInput, RecommendationError
from .models import Article, Engagement, UserPreferences, parse_article, parse_articles, parse_preferences
from .recommendations import (
    RecommendationOptions,
    RecommendationScore,
    diversify_recommendations,
    get_latest_posts,
    get_personalized_recommendations,
    get_popular_posts,
    get_related_posts,
    get_smart_recommendations,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
)

__all__ = [
    "Article",
    "Engagement",
    "InvalidInput",
    "RecommendationError",
    "RecommendationOptions",
    "RecommendationScore",
    "UserPreferences",
    "diversify_recommendations",
    "get_latest_posts",
    "get_logger",
    "get_personalized_recommendations",
    "get_popular_posts",
    "get_related_posts",
    "get_smart_recommendations",
    "parse_article",
    "parse_articles",
    "parse_preferences",
    "setup_logging",
    "stop_logging",
]
