"""
Article and reader preference models.

These models describe the records handed over by the content store and the
per-reader preference bundle. They are read-only inputs to the recommendation
core; nothing here is persisted.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..exceptions import InvalidInput

_ENGAGEMENT_KEYS = ("views", "likes", "shares")


def coerce_datetime(value: Any) -> datetime:
    """Turn a datetime, date or ISO string into a timezone-aware datetime.

    Naive values are treated as UTC. Anything else raises InvalidInput.
    """
    if value is None:
        raise InvalidInput("A publish date is required.")
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidInput("A publish date is required.")
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidInput(f"Malformed date: {value!r}") from exc
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise InvalidInput(f"Unsupported date value: {value!r}")


def normalize_tags(tags: Optional[Iterable[Any]]) -> List[str]:
    """Strip tags, drop blanks and case-insensitive duplicates (first one wins)."""
    cleaned: List[str] = []
    seen = set()
    for tag in tags or []:
        if tag is None:
            continue
        text = str(tag).strip()
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        cleaned.append(text)
    return cleaned


class Engagement(BaseModel):
    """Engagement counters; missing counters are zero."""
    views: int = Field(default=0, ge=0, description="Page views")
    likes: int = Field(default=0, ge=0, description="Likes")
    shares: int = Field(default=0, ge=0, description="Shares")

    @field_validator("views", "likes", "shares", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class Article(BaseModel):
    """A candidate article as provided by the content store."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Stable article identifier")
    slug: Optional[str] = Field(default=None, description="URL slug")
    title: str = Field(default="", description="Article title")
    excerpt: Optional[str] = Field(default=None, description="Short teaser text")
    tags: List[str] = Field(default_factory=list, description="Article tags")
    content: str = Field(default="", description="Full text body")
    publish_date: datetime = Field(
        validation_alias=AliasChoices("publish_date", "publishDate", "date"),
        description="Publication time (UTC if no offset given)",
    )
    engagement: Engagement = Field(default_factory=Engagement, description="Engagement counters")
    reading_time_minutes: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("reading_time_minutes", "readingTime", "reading_time"),
        description="Estimated reading time in minutes",
    )
    category: Optional[str] = Field(default=None, description="Single category label")

    @model_validator(mode="before")
    @classmethod
    def _lift_engagement(cls, data: Any) -> Any:
        # Content stores often keep views/likes/shares flat on the record.
        if not isinstance(data, Mapping):
            return data
        flat = {key: data[key] for key in _ENGAGEMENT_KEYS if key in data}
        if not flat:
            return data
        data = {key: value for key, value in data.items() if key not in _ENGAGEMENT_KEYS}
        engagement = data.get("engagement")
        if isinstance(engagement, Engagement):
            engagement = engagement.model_dump()
        merged = dict(engagement or {})
        merged.update(flat)
        data["engagement"] = merged
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> Any:
        if value is None or isinstance(value, (list, tuple, set)):
            return normalize_tags(value)
        return value

    @field_validator("content", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("publish_date", mode="before")
    @classmethod
    def _parse_publish_date(cls, value: Any) -> datetime:
        return coerce_datetime(value)


class UserPreferences(BaseModel):
    """Behavioral history and stated interests of a single reader."""

    model_config = ConfigDict(populate_by_name=True)

    viewed_posts: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("viewed_posts", "viewedPosts"),
        description="Ids of articles the reader has already seen",
    )
    liked_tags: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("liked_tags", "likedTags"),
        description="Tags the reader has shown interest in",
    )
    preferred_reading_time: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("preferred_reading_time", "preferredReadingTime"),
        description="Preferred reading time in minutes",
    )
    preferred_categories: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("preferred_categories", "preferredCategories"),
        description="Categories the reader prefers",
    )

    @field_validator("liked_tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> Any:
        if value is None or isinstance(value, (list, tuple, set)):
            return normalize_tags(value)
        return value

    @field_validator("viewed_posts", "preferred_categories", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value]
        return value


ArticleRecord = Union[Article, Mapping[str, Any]]


def _describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'record'}: {error['msg']}"
        for error in exc.errors()
    )


def parse_article(record: ArticleRecord) -> Article:
    """Validate a raw article record, raising InvalidInput on failure."""
    if isinstance(record, Article):
        return record
    try:
        return Article.model_validate(record)
    except ValidationError as exc:
        record_id = record.get("id") if isinstance(record, Mapping) else None
        raise InvalidInput(f"Invalid article {record_id!r}: {_describe_errors(exc)}") from exc


def parse_articles(records: Iterable[ArticleRecord]) -> List[Article]:
    """Validate a sequence of raw article records."""
    return [parse_article(record) for record in records]


def parse_preferences(data: Union[UserPreferences, Mapping[str, Any], None]) -> UserPreferences:
    """Validate a reader preference bundle, raising InvalidInput on failure."""
    if isinstance(data, UserPreferences):
        return data
    try:
        return UserPreferences.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise InvalidInput(f"Invalid preferences: {_describe_errors(exc)}") from exc


def index_by_id(articles: Iterable[Article]) -> Dict[str, Article]:
    """Map article ids to articles; the first occurrence of an id wins."""
    index: Dict[str, Article] = {}
    for article in articles:
        index.setdefault(article.id, article)
    return index
