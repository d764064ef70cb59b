"""
Recommendation services: article scanning and recommendation assembly.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from recommendation_service.exceptions import InvalidInput
from recommendation_service.models import Article, UserPreferences, index_by_id, parse_article
from recommendation_service.recommendations import (
    diversify_recommendations,
    get_latest_posts,
    get_personalized_recommendations,
    get_popular_posts,
    get_related_posts,
    get_smart_recommendations,
)
from .models import RecommendationMode, RecommendedArticle

logger = logging.getLogger(__name__)


class ArticleScanner:
    """Service for scanning and caching article records stored as JSON files."""

    def __init__(self, articles_dir: Path):
        self.articles_dir = Path(articles_dir)
        self._cache: Dict[str, Any] = {
            "articles": None,
            "count": 0,
            "latest_mtime": 0.0,
        }

    def scan_articles(self) -> List[Article]:
        """Load every ``*.json`` article in the directory.

        Files that fail validation are logged and skipped. The result is cached
        until the number of files or their latest mtime changes.
        """
        if not self.articles_dir.exists():
            return []

        json_files = sorted(self.articles_dir.glob("*.json"))
        count = len(json_files)
        latest_mtime = 0.0
        for path in json_files:
            try:
                latest_mtime = max(latest_mtime, path.stat().st_mtime)
            except OSError:
                continue

        if (
            self._cache.get("articles") is not None
            and self._cache.get("count") == count
            and float(self._cache.get("latest_mtime") or 0.0) >= latest_mtime
        ):
            return list(self._cache["articles"])

        articles: List[Article] = []
        for path in json_files:
            try:
                record = json.loads(path.read_text(encoding="utf-8"))
                if isinstance(record, dict):
                    record.setdefault("id", path.stem)
                articles.append(parse_article(record))
            except (OSError, json.JSONDecodeError, InvalidInput) as e:
                logger.warning("Skipping article file %s: %s", path.name, e)
                continue

        self._cache["articles"] = list(articles)
        self._cache["count"] = count
        self._cache["latest_mtime"] = latest_mtime
        logger.info("Loaded %d articles from %s", len(articles), self.articles_dir)
        return articles

    def get_article(self, article_id: str) -> Optional[Article]:
        return index_by_id(self.scan_articles()).get(article_id)

    def clear_cache(self):
        """Clear the internal cache to force re-scanning on next request."""
        self._cache = {
            "articles": None,
            "count": 0,
            "latest_mtime": 0.0,
        }


class RecommendationService:
    """Assembles recommendation lists for the web layer."""

    def __init__(self, article_scanner: ArticleScanner, recommendation_config):
        """
        Args:
            article_scanner: Source of candidate articles
            recommendation_config: RecommendationConfig with default knobs
        """
        self.article_scanner = article_scanner
        self.config = recommendation_config

    def recommend(
        self,
        mode: Union[RecommendationMode, str] = RecommendationMode.SMART,
        current_article_id: Optional[str] = None,
        user_tags: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        diversify: bool = False,
        now: Optional[datetime] = None,
    ) -> List[RecommendedArticle]:
        """Recommend articles in one of the widget modes.

        With ``diversify`` the ranked pool is widened by the configured factor
        before the greedy diversifier trims it back to ``limit``.
        """
        if not isinstance(mode, RecommendationMode):
            if not RecommendationMode.is_valid(mode):
                raise InvalidInput(f"Unknown recommendation mode: {mode!r}")
            mode = RecommendationMode(mode)
        limit = self.config.max_results if limit is None else limit
        pool_size = limit * self.config.diversity_pool_factor if diversify else limit

        articles = self.article_scanner.scan_articles()
        index = index_by_id(articles)

        if mode is RecommendationMode.SMART:
            options = self.config.to_options(
                max_results=pool_size,
                user_tags=list(user_tags or []),
                current_article_id=current_article_id,
            )
            items = [
                RecommendedArticle(article=index[scored.article_id], score=scored.score, reasons=scored.reasons)
                for scored in get_smart_recommendations(articles, options, now=now)
            ]
        else:
            candidates = [article for article in articles if article.id != current_article_id]
            if mode is RecommendationMode.POPULAR:
                ranked = get_popular_posts(candidates, pool_size)
            else:
                ranked = get_latest_posts(candidates, pool_size)
            items = [RecommendedArticle(article=article) for article in ranked]

        if diversify:
            items = diversify_recommendations(items, limit)
        logger.debug("Recommended %d articles in %s mode", len(items), mode.value)
        return items[:limit]

    def related(self, article_id: str, limit: int = 5) -> Optional[List[RecommendedArticle]]:
        """Articles related to ``article_id``; None when the article is unknown."""
        articles = self.article_scanner.scan_articles()
        target = index_by_id(articles).get(article_id)
        if target is None:
            return None
        return [RecommendedArticle(article=article) for article in get_related_posts(articles, target, limit)]

    def personalized(
        self,
        preferences: Union[UserPreferences, Mapping[str, Any], None],
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[RecommendedArticle]:
        """Unread articles ranked by the reader's preferences."""
        limit = self.config.max_results if limit is None else limit
        articles = self.article_scanner.scan_articles()
        ranked = get_personalized_recommendations(articles, preferences, limit, now=now)
        return [RecommendedArticle(article=article) for article in ranked]

    def clear_cache(self):
        self.article_scanner.clear_cache()
