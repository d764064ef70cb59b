#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
This script ensures the correct Python path is set and runs the app.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from config_manager import get_app_config
from recommendation_service.logging_config import setup_logging, stop_logging

# Import and run the Flask app
from app.main import app

if __name__ == "__main__":
    app_config = get_app_config()
    setup_logging(app_config.debug)

    print("🚀 Starting article recommender...")
    print(f"📁 Working directory: {current_dir}")

    try:
        app.run(
            host=app_config.host,
            port=app_config.port,
            debug=app_config.debug
        )
    finally:
        stop_logging()
