"""Tests for the in-memory article store."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from conftest import NOW, make_article
from orgwatch.store import ArticleFilter, InMemoryArticleStore, article_from_dict, load_articles


@pytest.fixture
def populated() -> InMemoryArticleStore:
    return InMemoryArticleStore(
        [
            make_article("old", published_at=NOW - timedelta(days=40), relevance=0.9),
            make_article("new", published_at=NOW - timedelta(days=1), relevance=0.4),
            make_article("lmt", organizations=("Lockheed Martin",), published_at=NOW),
        ]
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start": NOW, "end": NOW - timedelta(days=1)},
        {"min_relevance": 1.5},
        {"limit": 1001},
        {"limit": -1},
        {"offset": -1},
    ],
)
def test_filter_validation(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        ArticleFilter(**kwargs)


async def test_newest_first_with_total(populated: InMemoryArticleStore) -> None:
    articles, total = await populated.list_articles(ArticleFilter(limit=2))
    assert [a.id for a in articles] == ["lmt", "new"]
    assert total == 3


async def test_organization_match_is_case_insensitive(populated: InMemoryArticleStore) -> None:
    articles, _ = await populated.list_articles(ArticleFilter(organization=" lockheed martin "))
    assert [a.id for a in articles] == ["lmt"]


async def test_window_and_relevance(populated: InMemoryArticleStore) -> None:
    articles, _ = await populated.list_articles(
        ArticleFilter(start=NOW - timedelta(days=7), min_relevance=0.5)
    )
    assert [a.id for a in articles] == ["lmt"]


async def test_offset(populated: InMemoryArticleStore) -> None:
    articles, total = await populated.list_articles(ArticleFilter(offset=2))
    assert [a.id for a in articles] == ["old"]
    assert total == 3


async def test_get_article(populated: InMemoryArticleStore) -> None:
    article = await populated.get_article("new")
    assert article is not None
    assert article.relevance_score == 0.4
    assert await populated.get_article("missing") is None


def test_article_from_dict_defaults() -> None:
    article = article_from_dict(
        {"id": 7, "title": "T", "companies": ["RTX"], "published_at": "2026-10-01T08:00:00"}
    )
    assert article.id == "7"
    assert article.organizations == ("RTX",)
    assert article.published_at == datetime(2026, 10, 1, 8, 0, tzinfo=UTC)
    assert article.guid == "7"
    assert article.relevance_score == 0.0


def test_load_articles(tmp_path: Path) -> None:
    path = tmp_path / "articles.yaml"
    path.write_text(
        """
articles:
  - id: a1
    title: RTX news
    organizations: [Raytheon Technologies]
    published_at: 2026-10-14T12:00:00Z
    relevance_score: 0.9
  - id: a2
    title: Pentagon budget
"""
    )
    articles = load_articles(path)

    assert [a.id for a in articles] == ["a1", "a2"]
    assert articles[0].published_at == datetime(2026, 10, 14, 12, 0, tzinfo=UTC)
    assert articles[1].published_at is None


def test_load_articles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_articles(path) == []
