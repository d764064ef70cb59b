"""
Greedy diversification of an already ranked pool.
"""

from __future__ import annotations

from typing import Any, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple, TypeVar
import logging

from .signals import ensure_limit

logger = logging.getLogger(__name__)

NEW_TAG_WEIGHT = 0.7
NEW_CATEGORY_WEIGHT = 0.3

T = TypeVar("T")


def _facets(item: Any) -> Tuple[FrozenSet[str], Optional[str]]:
    if isinstance(item, Mapping):
        tags, category = item.get("tags"), item.get("category")
    else:
        tags, category = getattr(item, "tags", None), getattr(item, "category", None)
    return frozenset(str(tag).lower() for tag in tags or []), str(category).lower() if category else None


def diversity_gain(item: Any, used_tags: Set[str], used_categories: Set[str]) -> float:
    """Novelty of ``item`` given the tags and categories already selected."""
    tags, category = _facets(item)
    new_tags = len(tags - used_tags)
    new_category = category is not None and category not in used_categories
    return new_tags * NEW_TAG_WEIGHT + (NEW_CATEGORY_WEIGHT if new_category else 0.0)


def diversify_recommendations(pool: Sequence[T], limit: int = 6) -> List[T]:
    """Pick up to ``limit`` items from a ranked pool, favouring unseen tags and categories.

    The top item is always kept. Each further pick maximises
    0.7 * new tags + 0.3 * new category; the earliest item wins ties. This is a
    single greedy pass, not an optimal cover. Pools no larger than ``limit``
    come back unchanged.
    """
    ensure_limit(limit)
    if len(pool) <= limit:
        return list(pool)
    if limit == 0:
        return []

    remaining = list(pool)
    head = remaining.pop(0)
    selected = [head]
    used_tags, category = _facets(head)
    used_tags = set(used_tags)
    used_categories = {category} if category else set()

    while len(selected) < limit and remaining:
        best_index = 0
        best_gain = -1.0
        for index, item in enumerate(remaining):
            gain = diversity_gain(item, used_tags, used_categories)
            if gain > best_gain:
                best_index, best_gain = index, gain

        pick = remaining.pop(best_index)
        selected.append(pick)
        tags, category = _facets(pick)
        used_tags |= tags
        if category:
            used_categories.add(category)

    logger.debug("Diversified pool of %d down to %d items", len(pool), len(selected))
    return selected
