"""
Recommendation package for "what to read next" rankings.

Pure scoring functions, a pluggable composite engine, a greedy diversifier and
a handful of simpler views. Reusable by the web layer, the debug tooling or
any batch job without pulling in Flask.
"""

from .diversity import diversify_recommendations, diversity_gain
from .engine import (
    ContentSimilarityStrategy,
    FreshnessStrategy,
    PopularityStrategy,
    ReadingLengthStrategy,
    RecommendationContext,
    RecommendationEngine,
    RecommendationOptions,
    RecommendationScore,
    RecommendationStrategy,
    RelevanceStrategy,
    StrategyScore,
    TagMatchStrategy,
    build_engine,
    get_smart_recommendations,
)
from .reasons import MAX_REASONS, ReasonCode, format_reason
from .signals import (
    calculate_content_similarity,
    calculate_freshness_score,
    calculate_popularity_score,
    calculate_relevance_score,
    exact_tag_matches,
)
from .views import (
    get_latest_posts,
    get_personalized_recommendations,
    get_popular_posts,
    get_related_posts,
)

__all__ = [
    "ContentSimilarityStrategy",
    "FreshnessStrategy",
    "MAX_REASONS",
    "PopularityStrategy",
    "ReadingLengthStrategy",
    "ReasonCode",
    "RecommendationContext",
    "RecommendationEngine",
    "RecommendationOptions",
    "RecommendationScore",
    "RecommendationStrategy",
    "RelevanceStrategy",
    "StrategyScore",
    "TagMatchStrategy",
    "build_engine",
    "calculate_content_similarity",
    "calculate_freshness_score",
    "calculate_popularity_score",
    "calculate_relevance_score",
    "diversify_recommendations",
    "diversity_gain",
    "exact_tag_matches",
    "format_reason",
    "get_latest_posts",
    "get_personalized_recommendations",
    "get_popular_posts",
    "get_related_posts",
    "get_smart_recommendations",
]
