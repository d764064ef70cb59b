"""
Recommendation routes for API endpoints.
"""
from flask import Blueprint, jsonify, request

from recommendation_service.exceptions import InvalidInput
from .models import RecommendationMode
from .services import RecommendationService

MAX_LIMIT = 50


def _parse_limit(raw, default: int) -> int:
    try:
        limit = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        limit = default
    return max(1, min(limit, MAX_LIMIT))


def _parse_flag(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw or "").strip().lower() in ("1", "true", "yes", "on")


def _parse_tags(raw) -> list:
    return [tag.strip() for tag in (raw or "").split(",") if tag.strip()]


def create_recommendation_routes(recommendation_service: RecommendationService) -> Blueprint:
    """Create recommendation routes blueprint."""
    bp = Blueprint('recommendations', __name__, url_prefix='/api/recommendations')

    @bp.errorhandler(InvalidInput)
    def handle_invalid_input(error):
        return jsonify({"error": "invalid_input", "message": str(error)}), 400

    @bp.route('/', methods=['GET'])
    def get_recommendations():
        """
        Get recommended articles.

        Query parameters:
            - mode: smart (default), popular or latest
            - current: id of the article being read
            - tags: comma separated reader tags
            - limit: Maximum articles to return (default from config, max 50)
            - diversify: widen the pool and diversify by tags/category
        """
        mode = request.args.get('mode', RecommendationMode.SMART.value)
        if not RecommendationMode.is_valid(mode):
            mode = RecommendationMode.SMART.value

        limit = _parse_limit(request.args.get('limit'), recommendation_service.config.max_results)
        items = recommendation_service.recommend(
            mode=mode,
            current_article_id=request.args.get('current') or None,
            user_tags=_parse_tags(request.args.get('tags')),
            limit=limit,
            diversify=_parse_flag(request.args.get('diversify')),
        )
        return jsonify({
            "mode": mode,
            "items": [item.to_dict() for item in items],
            "count": len(items),
        })

    @bp.route('/related/<article_id>', methods=['GET'])
    def get_related(article_id):
        """Get articles related to the given article."""
        limit = _parse_limit(request.args.get('limit'), 5)
        items = recommendation_service.related(article_id, limit)
        if items is None:
            return jsonify({"error": "not_found", "message": f"Unknown article: {article_id}"}), 404
        return jsonify({
            "article_id": article_id,
            "items": [item.to_dict() for item in items],
            "count": len(items),
        })

    @bp.route('/personalized', methods=['POST'])
    def get_personalized():
        """
        Get personalized recommendations.

        JSON body: viewed_posts, liked_tags, preferred_reading_time,
        preferred_categories and an optional limit.
        """
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            raise InvalidInput("Request body must be a JSON object.")
        limit = _parse_limit(payload.pop('limit', None), recommendation_service.config.max_results)
        items = recommendation_service.personalized(payload, limit)
        return jsonify({
            "items": [item.to_dict() for item in items],
            "count": len(items),
        })

    @bp.route('/clear-cache', methods=['POST'])
    def clear_cache():
        """Clear the article cache."""
        recommendation_service.clear_cache()
        return jsonify({"status": "ok", "message": "Cache cleared"})

    return bp
