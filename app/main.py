"""
Flask application wiring for the article recommender.
"""
from pathlib import Path

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager, config_manager as default_config_manager
from app.recommendations.factory import create_recommendation_module

PROJECT_ROOT = Path(__file__).parent.parent


def create_app(config_manager: ConfigManager = None) -> Flask:
    """Build the Flask app and register the recommendation module."""
    config_manager = config_manager or default_config_manager
    paths_config = config_manager.get_paths_config()
    recommendation_config = config_manager.get_recommendation_config()

    flask_app = Flask(__name__)
    flask_app.wsgi_app = ProxyFix(
        flask_app.wsgi_app,
        x_proto=1,     # trust 1 hop for X-Forwarded-Proto
        x_host=1,      # trust 1 hop for X-Forwarded-Host
        x_prefix=1)    # trust 1 hop for X-Forwarded-Prefix

    recommendation_module = create_recommendation_module(
        articles_dir=PROJECT_ROOT / paths_config.articles_dir,
        recommendation_config=recommendation_config,
    )
    flask_app.register_blueprint(recommendation_module["blueprint"])
    flask_app.extensions["recommendation_module"] = recommendation_module

    @flask_app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"})

    return flask_app


app = create_app()
