"""Tests for ContextRetriever and article ranking."""

import asyncio
from datetime import timedelta

import pytest

from conftest import NOW, FakeClock, make_article
from orgwatch.data import Article, EvidenceOrigin, QueryAnalysis, QueryType, TimeWindow
from orgwatch.retrieval import ContextRetriever, rank_articles, score_article
from orgwatch.store import ArticleFilter, InMemoryArticleStore


class RecordingStore(InMemoryArticleStore):
    """In-memory store that records every filter it receives."""

    def __init__(self, articles: list[Article] | None = None) -> None:
        super().__init__(articles)
        self.filters: list[ArticleFilter] = []

    async def list_articles(self, article_filter: ArticleFilter) -> tuple[list[Article], int]:
        self.filters.append(article_filter)
        return await super().list_articles(article_filter)


class FailingStore(RecordingStore):
    def __init__(self, fail_for: set[str | None]) -> None:
        super().__init__([make_article("ok-1", organizations=("Lockheed Martin",))])
        self._fail_for = fail_for

    async def list_articles(self, article_filter: ArticleFilter) -> tuple[list[Article], int]:
        if article_filter.organization in self._fail_for:
            raise ConnectionError("store unavailable")
        return await super().list_articles(article_filter)


class SlowStore(RecordingStore):
    async def list_articles(self, article_filter: ArticleFilter) -> tuple[list[Article], int]:
        await asyncio.sleep(1)
        return ([], 0)


# -- scoring --


def test_financial_title_boost() -> None:
    article = make_article("a", "RTX third quarter earnings beat", relevance=0.5)
    assert score_article(article, QueryType.FINANCIAL) == pytest.approx(0.7)
    assert score_article(article, QueryType.GENERAL) == 0.5


def test_contracts_title_boost() -> None:
    article = make_article("a", "Raytheon wins Navy contract award", relevance=0.5)
    assert score_article(article, QueryType.CONTRACTS) == pytest.approx(0.7)
    assert score_article(article, QueryType.FINANCIAL) == 0.5


def test_rank_clamps_sorts_and_truncates() -> None:
    articles = [
        make_article(f"a{i}", "Quarterly revenue update", relevance=0.1 * i) for i in range(12)
    ]
    evidence = rank_articles(articles, QueryType.FINANCIAL, top_k=10)

    assert len(evidence) == 10
    scores = [e.relevance_score for e in evidence]
    assert scores == sorted(scores, reverse=True)
    assert all(0.0 <= s <= 1.0 for s in scores)
    assert all(e.origin == EvidenceOrigin.LOCAL for e in evidence)


def test_rank_ties_keep_original_order() -> None:
    articles = [make_article(f"a{i}", relevance=0.5) for i in range(4)]
    evidence = rank_articles(articles, QueryType.GENERAL, top_k=10)
    assert [e.article_id for e in evidence] == ["a0", "a1", "a2", "a3"]


def test_rank_deduplicates_by_id() -> None:
    article = make_article("dup")
    evidence = rank_articles([article, article], QueryType.GENERAL, top_k=10)
    assert len(evidence) == 1


# -- retrieval --


async def test_retrieves_per_organization() -> None:
    store = RecordingStore(
        [
            make_article("r1", organizations=("Raytheon Technologies",), relevance=0.9),
            make_article("l1", organizations=("Lockheed Martin",), relevance=0.7),
            make_article("w1", organizations=("US War Department",), relevance=0.8),
        ]
    )
    retriever = ContextRetriever(store, clock=FakeClock())
    analysis = QueryAnalysis(company_names=("Raytheon Technologies",))

    evidence = await retriever.retrieve(analysis, ["Lockheed Martin"])

    assert [f.organization for f in store.filters] == [
        "Raytheon Technologies",
        "Lockheed Martin",
    ]
    assert all(f.limit == 20 for f in store.filters)
    assert [e.article_id for e in evidence] == ["r1", "l1"]


async def test_unscoped_retrieval_is_single_bounded_query() -> None:
    store = RecordingStore([make_article(f"a{i}") for i in range(30)])
    retriever = ContextRetriever(store, clock=FakeClock())

    evidence = await retriever.retrieve(QueryAnalysis())

    assert len(store.filters) == 1
    assert store.filters[0].organization is None
    assert store.filters[0].limit == 20
    assert len(evidence) == 10


async def test_default_window_is_trailing_90_days() -> None:
    store = RecordingStore(
        [
            make_article("new", published_at=NOW - timedelta(days=10)),
            make_article("old", published_at=NOW - timedelta(days=120)),
        ]
    )
    retriever = ContextRetriever(store, clock=FakeClock())

    evidence = await retriever.retrieve(QueryAnalysis())

    assert store.filters[0].start == NOW - timedelta(days=90)
    assert store.filters[0].end is None
    assert [e.article_id for e in evidence] == ["new"]


async def test_explicit_window_is_used() -> None:
    store = RecordingStore()
    retriever = ContextRetriever(store, clock=FakeClock())
    window = TimeWindow(start=NOW - timedelta(days=7), end=NOW)

    await retriever.retrieve(QueryAnalysis(time_window=window))

    assert store.filters[0].start == window.start
    assert store.filters[0].end == window.end


async def test_failed_organization_query_is_skipped() -> None:
    store = FailingStore({"Raytheon Technologies"})
    retriever = ContextRetriever(store, clock=FakeClock())
    analysis = QueryAnalysis(company_names=("Raytheon Technologies", "Lockheed Martin"))

    evidence = await retriever.retrieve(analysis)

    assert [e.article_id for e in evidence] == ["ok-1"]


async def test_failed_unscoped_query_yields_nothing() -> None:
    retriever = ContextRetriever(FailingStore({None}), clock=FakeClock())
    assert await retriever.retrieve(QueryAnalysis()) == []


async def test_store_timeout_degrades_to_empty() -> None:
    retriever = ContextRetriever(SlowStore(), timeout=0.01, clock=FakeClock())
    assert await retriever.retrieve(QueryAnalysis()) == []
