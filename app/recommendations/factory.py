"""
Factory for creating the recommendation module.
"""
from pathlib import Path

from .services import ArticleScanner, RecommendationService
from .routes import create_recommendation_routes


def create_recommendation_module(articles_dir: Path, recommendation_config, article_scanner=None) -> dict:
    """
    Create the recommendation module with all its components.

    Args:
        articles_dir: Directory containing article JSON files
        recommendation_config: RecommendationConfig with default knobs
        article_scanner: Optional pre-built scanner (e.g. shared with other modules)

    Returns:
        Dictionary containing:
            - scanner: ArticleScanner instance
            - service: RecommendationService instance
            - blueprint: Flask blueprint for routes
    """
    scanner = article_scanner or ArticleScanner(articles_dir)
    service = RecommendationService(scanner, recommendation_config)
    blueprint = create_recommendation_routes(service)

    return {
        "scanner": scanner,
        "service": service,
        "blueprint": blueprint,
    }
