"""Local evidence retrieval and ranking."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from orgwatch.data import Article, EvidenceItem, QueryAnalysis, QueryType
from orgwatch.query.heuristic import utc_now
from orgwatch.store import ArticleFilter, ArticleStore

logger = logging.getLogger(__name__)

TYPE_BOOST = 0.2
_FINANCIAL_TITLE_TERMS = ("earnings", "quarter", "revenue")
_CONTRACT_TITLE_TERMS = ("contract", "award")


def score_article(article: Article, query_type: QueryType) -> float:
    """Stored relevance plus a boost when the title matches the query type."""
    score = article.relevance_score
    title = article.title.lower()
    if query_type is QueryType.FINANCIAL and any(t in title for t in _FINANCIAL_TITLE_TERMS):
        score += TYPE_BOOST
    if query_type is QueryType.CONTRACTS and any(t in title for t in _CONTRACT_TITLE_TERMS):
        score += TYPE_BOOST
    return score


def rank_articles(
    articles: list[Article], query_type: QueryType, top_k: int
) -> list[EvidenceItem]:
    """Score, sort (stable, descending) and truncate articles to evidence.

    Duplicate articles (same id, e.g. tagged with two requested organizations)
    are kept once.
    """
    seen: set[str] = set()
    scored: list[tuple[float, Article]] = []
    for article in articles:
        if article.id in seen:
            continue
        seen.add(article.id)
        scored.append((score_article(article, query_type), article))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [EvidenceItem.from_article(a, s) for s, a in scored[:top_k]]


class ContextRetriever:
    """Pull candidate articles for an analyzed question and re-rank them locally.

    When organizations are known, one bounded query is issued per
    organization; these run concurrently (at most ``max_concurrency`` at a
    time) and are joined in organization order before ranking. Otherwise a
    single unscoped page is fetched. A failing store query is logged and
    contributes nothing.

    Args:
        store: Stored article collection.
        default_window_days: Trailing window used when the analysis has none.
        page_size: Articles fetched per store query.
        top_k: Evidence items kept after ranking.
        max_concurrency: Parallel store queries.
        timeout: Seconds allowed per store query.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(
        self,
        store: ArticleStore,
        *,
        default_window_days: int = 90,
        page_size: int = 20,
        top_k: int = 10,
        max_concurrency: int = 4,
        timeout: float = 10.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._default_window = timedelta(days=default_window_days)
        self._page_size = page_size
        self._top_k = top_k
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._timeout = timeout
        self._clock = clock

    async def retrieve(
        self,
        analysis: QueryAnalysis,
        org_hints: list[str] | tuple[str, ...] = (),
    ) -> list[EvidenceItem]:
        organizations = list(dict.fromkeys([*analysis.company_names, *org_hints]))

        if analysis.time_window is not None:
            start, end = analysis.time_window.start, analysis.time_window.end
        else:
            start, end = self._clock() - self._default_window, None

        if organizations:
            tasks = [self._fetch(org, start, end) for org in organizations]
            results = await asyncio.gather(*tasks)
            articles = [a for batch in results for a in batch]
        else:
            articles = await self._fetch(None, start, end)

        evidence = rank_articles(articles, analysis.query_type, self._top_k)
        logger.info(
            "Retrieved %d candidate articles, kept %d (organizations=%s)",
            len(articles),
            len(evidence),
            organizations or "any",
        )
        return evidence

    async def _fetch(
        self,
        organization: str | None,
        start: datetime | None,
        end: datetime | None,
    ) -> list[Article]:
        article_filter = ArticleFilter(
            organization=organization,
            start=start,
            end=end,
            limit=self._page_size,
        )
        async with self._semaphore:
            try:
                articles, _total = await asyncio.wait_for(
                    self._store.list_articles(article_filter), timeout=self._timeout
                )
            except Exception as e:
                logger.warning(
                    "Failed to get articles for organization %s. Error: %r", organization, e
                )
                return []
        return articles
