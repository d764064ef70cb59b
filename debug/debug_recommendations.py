#!/usr/bin/env python3
"""
Debug tool for the recommendation engine.

Ranks the articles in a directory and prints how every strategy contributed
to each score.

Usage:
    python debug/debug_recommendations.py [--articles-dir DIR] [--current ID]
                                          [--tags a,b] [--limit N]
                                          [--no-popular] [--no-fresh] [--no-related]
                                          [--diversify]

Example:
    python debug/debug_recommendations.py --current react-hooks --tags react,typescript
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.recommendations.services import ArticleScanner
from config_manager import get_paths_config, get_recommendation_config
from recommendation_service.exceptions import InvalidInput
from recommendation_service.logging_config import setup_logging, stop_logging
from recommendation_service.models import index_by_id
from recommendation_service.recommendations import (
    RecommendationOptions,
    build_engine,
    diversify_recommendations,
    get_smart_recommendations,
)


def print_section(title: str):
    """Print a section header."""
    print(f"\n{'='*80}")
    print(f"  {title}")
    print(f"{'='*80}")


def print_breakdown(breakdown: Dict[str, float]):
    if not breakdown:
        print("    (no contributions)")
        return
    for name, value in breakdown.items():
        print(f"    {name:20s} {value:8.4f}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Explain recommendation scores for a set of articles.")
    parser.add_argument("--articles-dir", type=Path, default=None, help="Directory of article JSON files")
    parser.add_argument("--current", default=None, help="Id of the article being read")
    parser.add_argument("--tags", default="", help="Comma separated reader tags")
    parser.add_argument("--limit", type=int, default=None, help="Number of recommendations to show")
    parser.add_argument("--no-popular", action="store_true", help="Disable the popularity signal")
    parser.add_argument("--no-fresh", action="store_true", help="Disable the freshness signal")
    parser.add_argument("--no-related", action="store_true", help="Disable the tag relevance signal")
    parser.add_argument("--diversify", action="store_true", help="Diversify the final list by tags/category")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def debug_recommendations(args: argparse.Namespace) -> int:
    project_root = Path(__file__).parent.parent
    articles_dir = args.articles_dir or project_root / get_paths_config().articles_dir
    rec_config = get_recommendation_config()
    limit = args.limit if args.limit is not None else rec_config.max_results
    pool_size = limit * rec_config.diversity_pool_factor if args.diversify else limit

    try:
        options: RecommendationOptions = rec_config.to_options(
            max_results=pool_size,
            include_popular=not args.no_popular,
            include_fresh=not args.no_fresh,
            include_related=not args.no_related,
            user_tags=[tag.strip() for tag in args.tags.split(",") if tag.strip()],
            current_article_id=args.current,
        )
    except InvalidInput as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    print_section(f"Recommendation Debug for {articles_dir}")
    articles = ArticleScanner(articles_dir).scan_articles()
    index = index_by_id(articles)
    print(f"  Articles loaded: {len(articles)}")
    print(f"  Current article: {args.current or '(none)'}"
          f"{'' if not args.current or args.current in index else ' (not found, ignored)'}")
    print(f"  Reader tags: {', '.join(options.user_tags) or '(none)'}")

    engine = build_engine(options)
    print(f"\nStrategies: {', '.join(strategy.name for strategy in engine.strategies)}")
    print(f"  Weights: freshness={options.freshness_weight} popularity={options.popularity_weight} "
          f"relevance={options.relevance_weight} decay={options.time_decay_factor}")

    if not articles:
        print("\n❌ No articles found. Nothing to rank.")
        return 1

    scores = get_smart_recommendations(articles, options)
    if args.diversify:
        print(f"  Diversifying a pool of {len(scores)} down to {limit}")
        scores = diversify_recommendations(scores, limit)

    print_section("Ranking")
    for position, scored in enumerate(scores, 1):
        article = index[scored.article_id]
        print(f"\n  #{position} {scored.article_id}  score={scored.score:.4f}  {article.title}")
        print(f"    tags: {', '.join(article.tags) or '-'}  category: {article.category or '-'}")
        print_breakdown(scored.breakdown)
        if scored.reasons:
            print(f"    reasons: {' | '.join(scored.reasons)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    try:
        return debug_recommendations(args)
    finally:
        stop_logging()


if __name__ == "__main__":
    sys.exit(main())
