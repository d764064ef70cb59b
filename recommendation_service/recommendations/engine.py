"""
Composite recommendation engine.

Independent scoring strategies each contribute a weighted share of an article's
score; the engine sums them, clamps the total to [0, 1] and returns a stable,
explainable ranking. Nothing here touches storage or the web layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence
import logging

from ..models import Article, ArticleRecord, coerce_datetime, index_by_id, parse_articles
from .reasons import DEFAULT_LOCALE, MAX_REASONS, ReasonCode, format_reason
from .signals import (
    DEFAULT_DECAY_FACTOR,
    calculate_content_similarity,
    calculate_freshness_score,
    calculate_popularity_score,
    calculate_relevance_score,
    clamp,
    ensure_finite,
    ensure_limit,
    exact_tag_matches,
    reference_tags,
)

logger = logging.getLogger(__name__)

SIMILARITY_WEIGHT = 0.2
TAG_MATCH_BONUS = 0.1
MODERATE_LENGTH_BONUS = 0.1
MODERATE_LENGTH_RANGE = (3, 15)

FRESH_THRESHOLD = 0.7
POPULAR_THRESHOLD = 0.6
RELATED_THRESHOLD = 0.3
SIMILAR_THRESHOLD = 0.3


# ---------------------------------------------------------------------------
# Core data structures
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RecommendationOptions:
    """Knobs for the composite ranker."""

    max_results: int = 6
    include_popular: bool = True
    include_fresh: bool = True
    include_related: bool = True
    user_tags: Sequence[str] = field(default_factory=list)
    current_article_id: Optional[str] = None
    time_decay_factor: float = DEFAULT_DECAY_FACTOR
    popularity_weight: float = 0.3
    freshness_weight: float = 0.3
    relevance_weight: float = 0.4
    reason_locale: str = DEFAULT_LOCALE

    def __post_init__(self) -> None:
        for name in ("time_decay_factor", "popularity_weight", "freshness_weight", "relevance_weight"):
            setattr(self, name, ensure_finite(getattr(self, name), name))
        ensure_limit(self.max_results, "max_results")
        if isinstance(self.user_tags, str):
            self.user_tags = [self.user_tags]
        self.user_tags = list(self.user_tags or [])


@dataclass(slots=True)
class RecommendationContext:
    """Everything a strategy may look at for one ranking call."""

    candidates: Sequence[Article]
    current_article: Optional[Article] = None
    user_tags: Sequence[str] = field(default_factory=list)
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def all_reference_tags(self) -> List[str]:
        current_tags = self.current_article.tags if self.current_article else []
        return reference_tags(self.user_tags, current_tags)


@dataclass(slots=True)
class StrategyScore:
    """Per-strategy contribution for a single article."""

    value: float
    reason: Optional[ReasonCode] = None
    matched_tags: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class RecommendationScore:
    """Ranked result handed back to callers.

    Carries the article's tags and category so a ranking can go straight
    into the diversifier.
    """

    article_id: str
    score: float
    reasons: List[str] = field(default_factory=list)
    reason_codes: List[ReasonCode] = field(default_factory=list)
    matched_tags: List[str] = field(default_factory=list)
    breakdown: Dict[str, float] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "article_id": self.article_id,
            "score": self.score,
            "reasons": list(self.reasons),
            "reason_codes": [code.value for code in self.reason_codes],
            "matched_tags": list(self.matched_tags),
            "breakdown": dict(self.breakdown),
            "tags": list(self.tags),
            "category": self.category,
        }


class RecommendationStrategy(Protocol):
    """Interface for plug-and-play scoring strategies."""

    name: str

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        """Return per-article contributions keyed by article id."""


class RecommendationEngine:
    """Sums strategy contributions and returns a stable ranking."""

    def __init__(self, strategies: Sequence[RecommendationStrategy], locale: str = DEFAULT_LOCALE):
        if not strategies:
            raise ValueError("At least one recommendation strategy is required.")
        self.strategies = list(strategies)
        self.locale = locale

    def recommend(self, context: RecommendationContext) -> List[RecommendationScore]:
        totals: Dict[str, float] = {}
        results: Dict[str, RecommendationScore] = {}
        for article in context.candidates:
            if article.id in results:
                continue
            totals[article.id] = 0.0
            results[article.id] = RecommendationScore(
                article_id=article.id, score=0.0, tags=list(article.tags), category=article.category
            )

        for strategy in self.strategies:
            for article_id, partial in strategy.score(context).items():
                current = results.get(article_id)
                if current is None:
                    continue
                if partial.value <= 0 and partial.reason is None:
                    continue
                totals[article_id] += partial.value
                current.breakdown[strategy.name] = current.breakdown.get(strategy.name, 0.0) + partial.value
                if partial.reason is not None:
                    current.reason_codes.append(partial.reason)
                    current.reasons.append(format_reason(partial.reason, self.locale, partial.matched_tags))
                for tag in partial.matched_tags:
                    if tag not in current.matched_tags:
                        current.matched_tags.append(tag)

        for article_id, result in results.items():
            result.score = clamp(totals[article_id])
            del result.reasons[MAX_REASONS:]
            del result.reason_codes[MAX_REASONS:]

        # sorted() is stable, so equal scores keep candidate order.
        ranked = sorted(results.values(), key=lambda item: item.score, reverse=True)
        logger.debug(
            "Ranked %d candidates with strategies %s",
            len(ranked),
            [strategy.name for strategy in self.strategies],
        )
        return ranked


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class FreshnessStrategy:
    """Exponential recency decay."""

    name = "freshness"

    def __init__(self, weight: float, decay_factor: float = DEFAULT_DECAY_FACTOR):
        self.weight = weight
        self.decay_factor = decay_factor

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            signal = calculate_freshness_score(article.publish_date, self.decay_factor, now=context.now)
            scores[article.id] = StrategyScore(
                value=signal * self.weight,
                reason=ReasonCode.FRESH if signal > FRESH_THRESHOLD else None,
                metadata={"signal": signal},
            )
        return scores


class PopularityStrategy:
    """Log-compressed engagement."""

    name = "popularity"

    def __init__(self, weight: float):
        self.weight = weight

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            signal = calculate_popularity_score(article)
            scores[article.id] = StrategyScore(
                value=signal * self.weight,
                reason=ReasonCode.POPULAR if signal > POPULAR_THRESHOLD else None,
                metadata={"signal": signal},
            )
        return scores


class RelevanceStrategy:
    """Fuzzy tag overlap with the reader's tags and the current article."""

    name = "relevance"

    def __init__(self, weight: float):
        self.weight = weight

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        current_tags = context.current_article.tags if context.current_article else []
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            signal = calculate_relevance_score(article.tags, context.user_tags, current_tags)
            scores[article.id] = StrategyScore(
                value=signal * self.weight,
                reason=ReasonCode.RELATED if signal > RELATED_THRESHOLD else None,
                metadata={"signal": signal},
            )
        return scores


class ContentSimilarityStrategy:
    """Bag-of-words similarity to the article being read.

    Active whenever a current article is known, independent of the
    include_* switches.
    """

    name = "similarity"

    def __init__(self, weight: float = SIMILARITY_WEIGHT):
        self.weight = weight

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        if context.current_article is None:
            return {}
        anchor = context.current_article.content
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            signal = calculate_content_similarity(article.content, anchor)
            scores[article.id] = StrategyScore(
                value=signal * self.weight,
                reason=ReasonCode.SIMILAR_TOPIC if signal > SIMILAR_THRESHOLD else None,
                metadata={"signal": signal},
            )
        return scores


class TagMatchStrategy:
    """Flat bonus per tag that exactly matches a reference tag."""

    name = "tag_match"

    def __init__(self, bonus: float = TAG_MATCH_BONUS):
        self.bonus = bonus

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        references = context.all_reference_tags
        if not references:
            return {}
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            matches = exact_tag_matches(article.tags, references)
            if not matches:
                continue
            scores[article.id] = StrategyScore(
                value=len(matches) * self.bonus,
                reason=ReasonCode.TAG_MATCH,
                matched_tags=matches,
                metadata={"matched_count": len(matches)},
            )
        return scores


class ReadingLengthStrategy:
    """Bonus for articles that take a moderate time to read."""

    name = "reading_length"

    def __init__(self, bonus: float = MODERATE_LENGTH_BONUS, bounds: tuple = MODERATE_LENGTH_RANGE):
        self.bonus = bonus
        self.lower, self.upper = bounds

    def score(self, context: RecommendationContext) -> Dict[str, StrategyScore]:
        scores: Dict[str, StrategyScore] = {}
        for article in context.candidates:
            minutes = article.reading_time_minutes
            if not minutes or not self.lower <= minutes <= self.upper:
                continue
            scores[article.id] = StrategyScore(
                value=self.bonus,
                reason=ReasonCode.MODERATE_LENGTH,
                metadata={"reading_time_minutes": minutes},
            )
        return scores


# ---------------------------------------------------------------------------
# Factories & entry point
# ---------------------------------------------------------------------------


def build_engine(options: Optional[RecommendationOptions] = None) -> RecommendationEngine:
    """Assemble the strategies enabled by ``options``.

    Disabled signals are left out entirely, so they never show up in reasons.
    """
    options = options or RecommendationOptions()
    strategies: List[RecommendationStrategy] = []
    if options.include_fresh:
        strategies.append(FreshnessStrategy(options.freshness_weight, options.time_decay_factor))
    if options.include_popular:
        strategies.append(PopularityStrategy(options.popularity_weight))
    if options.include_related:
        strategies.append(RelevanceStrategy(options.relevance_weight))
    strategies.append(ContentSimilarityStrategy())
    strategies.append(TagMatchStrategy())
    strategies.append(ReadingLengthStrategy())
    return RecommendationEngine(strategies=strategies, locale=options.reason_locale)


def get_smart_recommendations(
    articles: Iterable[ArticleRecord],
    options: Optional[RecommendationOptions] = None,
    now: Optional[datetime] = None,
) -> List[RecommendationScore]:
    """Rank candidate articles by blended score, best first.

    The article named by ``options.current_article_id`` is never returned; if
    it is not among the candidates it is simply ignored.
    """
    options = options or RecommendationOptions()
    articles = parse_articles(articles)
    if not articles or options.max_results == 0:
        return []

    index = index_by_id(articles)
    current_article = None
    if options.current_article_id is not None:
        current_article = index.get(options.current_article_id)
        if current_article is None:
            logger.debug("Current article %r not among candidates; ignoring it", options.current_article_id)

    candidates = [article for article in index.values() if article.id != options.current_article_id]
    context = RecommendationContext(
        candidates=candidates,
        current_article=current_article,
        user_tags=options.user_tags,
        now=coerce_datetime(now) if now is not None else datetime.now(timezone.utc),
    )
    return build_engine(options).recommend(context)[: options.max_results]
