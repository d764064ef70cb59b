"""
Recommendation subsystem models for the web layer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from recommendation_service.models import Article


class RecommendationMode(Enum):
    """Ranking modes offered by the recommendation widget."""

    SMART = "smart"
    POPULAR = "popular"
    LATEST = "latest"

    @classmethod
    def is_valid(cls, mode: str) -> bool:
        """Check if a mode string is valid."""
        try:
            cls(mode)
            return True
        except ValueError:
            return False


@dataclass
class RecommendedArticle:
    """An article joined back to its score and reasons, ready for rendering."""
    article: Article
    score: Optional[float] = None
    reasons: List[str] = field(default_factory=list)

    @property
    def tags(self) -> List[str]:
        return self.article.tags

    @property
    def category(self) -> Optional[str]:
        return self.article.category

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        exclude = None if include_content else {"content"}
        return {
            "article": self.article.model_dump(mode="json", exclude=exclude),
            "score": self.score,
            "reasons": list(self.reasons),
        }
