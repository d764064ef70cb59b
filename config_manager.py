"""
Configuration management for the article recommender.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

from recommendation_service.recommendations import RecommendationOptions


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool


@dataclass
class RecommendationConfig:
    """Default knobs for the recommendation endpoints."""
    max_results: int
    include_popular: bool
    include_fresh: bool
    include_related: bool
    time_decay_factor: float
    popularity_weight: float
    freshness_weight: float
    relevance_weight: float
    diversity_pool_factor: int
    reason_locale: str

    def to_options(self, **overrides) -> RecommendationOptions:
        """Build ranker options from these defaults, with per-call overrides."""
        values = {
            "max_results": self.max_results,
            "include_popular": self.include_popular,
            "include_fresh": self.include_fresh,
            "include_related": self.include_related,
            "time_decay_factor": self.time_decay_factor,
            "popularity_weight": self.popularity_weight,
            "freshness_weight": self.freshness_weight,
            "relevance_weight": self.relevance_weight,
            "reason_locale": self.reason_locale,
        }
        values.update(overrides)
        return RecommendationOptions(**values)


@dataclass
class PathsConfig:
    """Path configuration settings."""
    articles_dir: str


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "recommender_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 22582,
                "debug": False,
            },
            "recommendations": {
                "max_results": 6,
                "include_popular": True,
                "include_fresh": True,
                "include_related": True,
                "time_decay_factor": 0.1,
                "popularity_weight": 0.3,
                "freshness_weight": 0.3,
                "relevance_weight": 0.4,
                "diversity_pool_factor": 3,
                "reason_locale": "en",
            },
            "paths": {
                "articles_dir": "content/articles",
            },
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = _env_flag(os.getenv("APP_DEBUG"))

        # Recommendation settings
        recommendations = self._config["recommendations"]
        if os.getenv("RECOMMENDATION_MAX_RESULTS"):
            recommendations["max_results"] = int(os.getenv("RECOMMENDATION_MAX_RESULTS"))

        if os.getenv("RECOMMENDATION_TIME_DECAY"):
            recommendations["time_decay_factor"] = float(os.getenv("RECOMMENDATION_TIME_DECAY"))

        for key in ("popularity", "freshness", "relevance"):
            value = os.getenv(f"RECOMMENDATION_{key.upper()}_WEIGHT")
            if value:
                recommendations[f"{key}_weight"] = float(value)

        if os.getenv("RECOMMENDATION_REASON_LOCALE"):
            recommendations["reason_locale"] = os.getenv("RECOMMENDATION_REASON_LOCALE")

        # Paths
        if os.getenv("ARTICLES_DIR"):
            self._config["paths"]["articles_dir"] = os.getenv("ARTICLES_DIR")

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
        )

    def get_recommendation_config(self) -> RecommendationConfig:
        """Get recommendation configuration."""
        rec_config = self._config["recommendations"]
        return RecommendationConfig(
            max_results=rec_config["max_results"],
            include_popular=rec_config["include_popular"],
            include_fresh=rec_config["include_fresh"],
            include_related=rec_config["include_related"],
            time_decay_factor=rec_config["time_decay_factor"],
            popularity_weight=rec_config["popularity_weight"],
            freshness_weight=rec_config["freshness_weight"],
            relevance_weight=rec_config["relevance_weight"],
            diversity_pool_factor=max(1, int(rec_config["diversity_pool_factor"])),
            reason_locale=rec_config["reason_locale"],
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        return PathsConfig(articles_dir=self._config["paths"]["articles_dir"])

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_recommendation_config() -> RecommendationConfig:
    """Get recommendation configuration."""
    return config_manager.get_recommendation_config()


def get_paths_config() -> PathsConfig:
    """Get paths configuration."""
    return config_manager.get_paths_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
