"""
Recommendation module exposing "what to read next" endpoints.
"""

from .services import ArticleScanner, RecommendationService
from .routes import create_recommendation_routes
from .factory import create_recommendation_module

__all__ = ['ArticleScanner', 'RecommendationService', 'create_recommendation_routes', 'create_recommendation_module']
