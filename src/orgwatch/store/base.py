from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from orgwatch.data import Article

MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class ArticleFilter:
    """Filter for listing stored articles.

    Raises:
        ValueError: If the date range is inverted or a bound is out of range.
    """

    organization: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    min_relevance: float | None = None
    limit: int = 20
    offset: int = 0

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("start date must not be after end date")
        if self.min_relevance is not None and not 0.0 <= self.min_relevance <= 1.0:
            raise ValueError("min_relevance must be between 0 and 1")
        if not 0 <= self.limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 0 and {MAX_PAGE_SIZE}")
        if self.offset < 0:
            raise ValueError("offset must not be negative")


class ArticleStore(Protocol):
    """Interface for the stored article collection."""

    async def list_articles(self, article_filter: ArticleFilter) -> tuple[list[Article], int]:
        """List articles matching a filter, newest first.

        Returns:
            Tuple of (page of articles, total matching count).
        """
        ...

    async def get_article(self, article_id: str) -> Article | None:
        """Return the article with this identifier, or None."""
        ...
