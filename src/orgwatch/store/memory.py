"""In-memory article store, seeded from YAML."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from orgwatch.data import Article
from orgwatch.store.base import ArticleFilter

_EPOCH = datetime.min.replace(tzinfo=UTC)


class InMemoryArticleStore:
    """Article store backed by a list held in memory.

    Organization matching is case-insensitive against each article's
    ``organizations``. Results are ordered newest first.

    Args:
        articles: Initial articles.
    """

    def __init__(self, articles: list[Article] | None = None) -> None:
        self._articles: dict[str, Article] = {a.id: a for a in articles or []}

    def add(self, article: Article) -> None:
        self._articles[article.id] = article

    def __len__(self) -> int:
        return len(self._articles)

    async def list_articles(self, article_filter: ArticleFilter) -> tuple[list[Article], int]:
        matched = [a for a in self._articles.values() if _matches(a, article_filter)]
        matched.sort(key=lambda a: a.published_at or _EPOCH, reverse=True)
        page = matched[article_filter.offset : article_filter.offset + article_filter.limit]
        return (page, len(matched))

    async def get_article(self, article_id: str) -> Article | None:
        return self._articles.get(article_id)


def _matches(article: Article, f: ArticleFilter) -> bool:
    if f.organization:
        wanted = f.organization.strip().lower()
        if wanted not in (o.lower() for o in article.organizations):
            return False
    if f.start is not None and (article.published_at is None or article.published_at < f.start):
        return False
    if f.end is not None and (article.published_at is None or article.published_at > f.end):
        return False
    if f.min_relevance is not None and article.relevance_score < f.min_relevance:
        return False
    return True


def _to_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def article_from_dict(raw: dict[str, Any]) -> Article:
    """Build an Article from a plain mapping (YAML/JSON record)."""
    organizations = raw.get("organizations") or raw.get("companies") or []
    return Article(
        id=str(raw["id"]),
        title=str(raw.get("title", "")),
        summary=str(raw.get("summary", "")),
        source_url=str(raw.get("source_url", "")),
        organizations=tuple(str(o) for o in organizations),
        published_at=_to_datetime(raw.get("published_at")),
        relevance_score=float(raw.get("relevance_score", 0.0)),
        feed_source=str(raw.get("feed_source", "")),
        content=str(raw.get("content", "")),
        guid=str(raw.get("guid", raw["id"])),
    )


def load_articles(path: Path | str) -> list[Article]:
    """Load articles from a YAML file with a top-level ``articles`` list.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        KeyError: If a record has no ``id``.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f) or {}
    return [article_from_dict(item) for item in raw.get("articles", [])]
