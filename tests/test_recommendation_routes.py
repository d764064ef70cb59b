"""
Tests for the recommendation web module: article scanning, the service and the API routes.
"""
import json
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from flask import Flask

from app.recommendations.factory import create_recommendation_module
from app.recommendations.models import RecommendationMode, RecommendedArticle
from app.recommendations.services import ArticleScanner
from config_manager import RecommendationConfig
from recommendation_service.exceptions import InvalidInput


def _config(**overrides) -> RecommendationConfig:
    values = dict(
        max_results=6,
        include_popular=True,
        include_fresh=True,
        include_related=True,
        time_decay_factor=0.1,
        popularity_weight=0.3,
        freshness_weight=0.3,
        relevance_weight=0.4,
        diversity_pool_factor=3,
        reason_locale="en",
    )
    values.update(overrides)
    return RecommendationConfig(**values)


def _write_article(directory: Path, article_id: str, **fields) -> Path:
    path = directory / f"{article_id}.json"
    path.write_text(json.dumps({"id": article_id, **fields}), encoding="utf-8")
    return path


class RecommendationModuleFixture:
    """Shared article directory with four articles."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.articles_dir = self.temp_dir / "articles"
        self.articles_dir.mkdir()

        now = datetime.now(timezone.utc)
        _write_article(
            self.articles_dir, "flask-intro",
            title="Intro to Flask", tags=["python", "flask"], category="dev",
            content="building web apps with flask", publishDate=(now - timedelta(days=1)).isoformat(),
            views=100, readingTime=5,
        )
        _write_article(
            self.articles_dir, "flask-deep",
            title="Flask in depth", tags=["python", "flask"], category="dev",
            content="building bigger web apps with flask", publishDate=(now - timedelta(days=2)).isoformat(),
            likes=50, readingTime=12,
        )
        _write_article(
            self.articles_dir, "pasta",
            title="Fresh pasta", tags=["cooking"], category="food",
            content="flour eggs and patience", publishDate=(now - timedelta(days=400)).isoformat(),
        )
        _write_article(
            self.articles_dir, "viral",
            title="Everyone shared this", tags=["news"], category="news",
            content="a story about everything", publishDate=(now - timedelta(days=100)).isoformat(),
            shares=500,
        )

        self.module = create_recommendation_module(self.articles_dir, _config())
        self.scanner = self.module["scanner"]
        self.service = self.module["service"]

    def teardown_method(self):
        shutil.rmtree(self.temp_dir)


class TestArticleScanner(RecommendationModuleFixture):

    def test_scan_loads_all_articles(self):
        articles = self.scanner.scan_articles()
        assert sorted(article.id for article in articles) == ["flask-deep", "flask-intro", "pasta", "viral"]

    def test_id_defaults_to_file_name(self):
        (self.articles_dir / "no-id.json").write_text(
            json.dumps({"title": "Anonymous", "date": "2024-01-01"}), encoding="utf-8"
        )
        assert self.scanner.get_article("no-id").title == "Anonymous"

    def test_invalid_files_are_skipped(self):
        (self.articles_dir / "broken.json").write_text("{not json", encoding="utf-8")
        _write_article(self.articles_dir, "negative", publishDate="2024-01-01", views=-1)
        _write_article(self.articles_dir, "undated", title="No date")

        ids = {article.id for article in self.scanner.scan_articles()}
        assert ids == {"flask-deep", "flask-intro", "pasta", "viral"}

    def test_missing_directory_yields_nothing(self):
        assert ArticleScanner(self.temp_dir / "missing").scan_articles() == []

    def test_cache_is_reused_until_files_change(self):
        first = self.scanner.scan_articles()
        assert self.scanner._cache["articles"] is not None
        assert [a.id for a in self.scanner.scan_articles()] == [a.id for a in first]

        _write_article(self.articles_dir, "added", publishDate="2024-01-01")
        assert self.scanner.get_article("added") is not None

    def test_clear_cache(self):
        self.scanner.scan_articles()
        self.scanner.clear_cache()
        assert self.scanner._cache["articles"] is None


class TestRecommendationService(RecommendationModuleFixture):

    def test_smart_mode_excludes_current_article(self):
        items = self.service.recommend(current_article_id="flask-intro")
        ids = [item.article.id for item in items]
        assert "flask-intro" not in ids
        assert ids[0] == "flask-deep"
        assert items[0].score == 1.0
        assert items[0].reasons == ["Recently published", "Popular", "Related content"]

    def test_popular_mode(self):
        items = self.service.recommend(mode="popular")
        assert [item.article.id for item in items] == ["viral", "flask-deep", "flask-intro", "pasta"]
        assert all(item.score is None for item in items)

    def test_latest_mode_excludes_current_article(self):
        items = self.service.recommend(mode=RecommendationMode.LATEST, current_article_id="flask-intro")
        assert [item.article.id for item in items] == ["flask-deep", "viral", "pasta"]

    def test_unknown_mode_is_rejected(self):
        with pytest.raises(InvalidInput):
            self.service.recommend(mode="random")

    def test_diversify_prefers_new_tags_and_categories(self):
        plain = self.service.recommend(mode="popular", limit=3)
        diverse = self.service.recommend(mode="popular", limit=3, diversify=True)
        assert [item.article.id for item in plain] == ["viral", "flask-deep", "flask-intro"]
        assert [item.article.id for item in diverse] == ["viral", "flask-deep", "pasta"]

    def test_smart_mode_diversify_widens_the_pool(self):
        plain = self.service.recommend(limit=3)
        diverse = self.service.recommend(limit=3, diversify=True)
        assert [item.article.id for item in plain] == ["flask-deep", "viral", "flask-intro"]
        assert [item.article.id for item in diverse] == ["flask-deep", "viral", "pasta"]
        assert diverse[2].score is not None

    def test_related(self):
        items = self.service.related("flask-intro")
        assert items[0].article.id == "flask-deep"
        assert "flask-intro" not in [item.article.id for item in items]

    def test_related_unknown_article(self):
        assert self.service.related("nope") is None

    def test_personalized_skips_viewed(self):
        items = self.service.personalized({"viewedPosts": ["flask-intro"], "likedTags": ["python"]})
        ids = [item.article.id for item in items]
        assert "flask-intro" not in ids
        assert ids[0] == "flask-deep"

    def test_recommended_article_serialization(self):
        item = RecommendedArticle(article=self.scanner.get_article("pasta"), score=0.5, reasons=["Popular"])
        data = item.to_dict()
        assert data["article"]["id"] == "pasta"
        assert "content" not in data["article"]
        assert data["score"] == 0.5
        assert item.to_dict(include_content=True)["article"]["content"] == "flour eggs and patience"


class TestRecommendationRoutes(RecommendationModuleFixture):

    def setup_method(self):
        super().setup_method()
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.register_blueprint(self.module["blueprint"])
        self.client = app.test_client()

    def test_recommendations_endpoint(self):
        response = self.client.get("/api/recommendations/?current=flask-intro&tags=python")
        assert response.status_code == 200
        data = response.get_json()
        assert data["mode"] == "smart"
        ids = [item["article"]["id"] for item in data["items"]]
        assert "flask-intro" not in ids
        assert data["count"] == len(ids) == 3

    def test_unknown_mode_falls_back_to_smart(self):
        data = self.client.get("/api/recommendations/?mode=shuffle").get_json()
        assert data["mode"] == "smart"
        assert data["count"] == 4

    def test_limit_is_clamped(self):
        data = self.client.get("/api/recommendations/?mode=latest&limit=0").get_json()
        assert data["count"] == 1
        data = self.client.get("/api/recommendations/?mode=latest&limit=abc").get_json()
        assert data["count"] == 4

    def test_diversify_flag(self):
        data = self.client.get("/api/recommendations/?mode=popular&limit=3&diversify=true").get_json()
        assert [item["article"]["id"] for item in data["items"]] == ["viral", "flask-deep", "pasta"]

    def test_related_endpoint(self):
        response = self.client.get("/api/recommendations/related/flask-intro?limit=1")
        assert response.status_code == 200
        data = response.get_json()
        assert data["article_id"] == "flask-intro"
        assert [item["article"]["id"] for item in data["items"]] == ["flask-deep"]

    def test_related_unknown_article_is_404(self):
        response = self.client.get("/api/recommendations/related/nope")
        assert response.status_code == 404
        assert response.get_json()["error"] == "not_found"

    def test_personalized_endpoint(self):
        response = self.client.post(
            "/api/recommendations/personalized",
            json={"viewedPosts": ["viral"], "preferredCategories": ["food"], "limit": 2},
        )
        assert response.status_code == 200
        data = response.get_json()
        ids = [item["article"]["id"] for item in data["items"]]
        assert data["count"] == 2
        assert "viral" not in ids

    def test_personalized_rejects_invalid_preferences(self):
        response = self.client.post("/api/recommendations/personalized", json={"viewedPosts": 5})
        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_input"

    def test_personalized_rejects_non_object_body(self):
        response = self.client.post("/api/recommendations/personalized", json=["viral"])
        assert response.status_code == 400

    def test_clear_cache_endpoint(self):
        self.scanner.scan_articles()
        response = self.client.post("/api/recommendations/clear-cache")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"
        assert self.scanner._cache["articles"] is None
