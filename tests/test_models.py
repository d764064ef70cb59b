"""
Tests for article and preference models.
"""
from datetime import date, datetime, timezone

import pytest

from recommendation_service.exceptions import InvalidInput
from recommendation_service.models import (
    Article,
    Engagement,
    UserPreferences,
    index_by_id,
    parse_article,
    parse_articles,
    parse_preferences,
)


def test_flat_engagement_keys_are_lifted():
    article = parse_article({
        "id": "post-1",
        "date": "2024-05-01",
        "views": 120,
        "likes": None,
        "shares": 3,
    })
    assert article.engagement == Engagement(views=120, likes=0, shares=3)
    assert article.publish_date == datetime(2024, 5, 1, tzinfo=timezone.utc)


def test_camel_case_aliases():
    article = parse_article({
        "id": "post-2",
        "publishDate": "2024-05-01T08:30:00+02:00",
        "readingTime": 7,
        "tags": ["Python"],
    })
    assert article.reading_time_minutes == 7
    assert article.publish_date.utcoffset().total_seconds() == 7200


def test_missing_optional_fields_default():
    article = Article(id="bare", publish_date=date(2024, 1, 1))
    assert article.tags == []
    assert article.content == ""
    assert article.engagement == Engagement()
    assert article.reading_time_minutes is None
    assert article.category is None


def test_tags_are_cleaned_and_deduplicated():
    article = Article(id="t", publish_date="2024-01-01", tags=[" React ", "react", "", None, "Hooks"])
    assert article.tags == ["React", "Hooks"]


def test_numeric_ids_become_strings():
    assert parse_article({"id": 42, "date": "2024-01-01"}).id == "42"


@pytest.mark.parametrize("record", [
    {"id": "x"},
    {"id": "x", "date": "yesterday"},
    {"id": "x", "date": None},
    {"id": "x", "date": "2024-01-01", "views": -1},
    {"id": "x", "date": "2024-01-01", "readingTime": -5},
    {"date": "2024-01-01"},
])
def test_invalid_records_raise_invalid_input(record):
    with pytest.raises(InvalidInput):
        parse_article(record)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        parse_article({"id": "x", "date": "nope"})


def test_parse_articles_passes_models_through():
    existing = Article(id="a", publish_date="2024-01-01")
    parsed = parse_articles([existing, {"id": "b", "date": "2024-01-02"}])
    assert parsed[0] is existing
    assert parsed[1].id == "b"


def test_index_by_id_keeps_first_duplicate():
    first = Article(id="dup", publish_date="2024-01-01", title="first")
    second = Article(id="dup", publish_date="2024-01-02", title="second")
    assert index_by_id([first, second])["dup"].title == "first"


def test_preferences_accept_camel_case():
    prefs = parse_preferences({
        "viewedPosts": ["a", "b"],
        "likedTags": ["python", "Python"],
        "preferredReadingTime": 10,
        "preferredCategories": ["tech"],
    })
    assert prefs == UserPreferences(
        viewed_posts=["a", "b"],
        liked_tags=["python"],
        preferred_reading_time=10,
        preferred_categories=["tech"],
    )


def test_preferences_default_to_empty():
    prefs = parse_preferences(None)
    assert prefs.viewed_posts == []
    assert prefs.liked_tags == []
    assert prefs.preferred_reading_time is None


def test_invalid_preferences_raise():
    with pytest.raises(InvalidInput):
        parse_preferences({"preferred_reading_time": "soon"})
