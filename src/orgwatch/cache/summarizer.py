"""Cached single-article summarization."""

import asyncio
import logging
import time
from datetime import timedelta

from orgwatch.cache.base import SummaryStore
from orgwatch.data import Article, ArticleSummary, CachedSummary
from orgwatch.errors import ArticleNotFoundError, GenerationError, ServiceError, SummarizationError
from orgwatch.generation.base import SUMMARY_PARAMS, GenerationParams, TextGenerator
from orgwatch.store.base import ArticleStore

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = """\
You summarize news articles. Write a compact, factual digest of the article \
in two to four sentences. Keep names, dates, figures and contract values. Do \
not add opinions or information that is not in the article.\
"""

MAX_BODY_CHARS = 6000


def build_summary_prompt(article: Article) -> str:
    parts = [f"Title: {article.title}"]
    if article.published_at:
        parts.append(f"Published: {article.published_at.date().isoformat()}")
    if article.summary:
        parts.append(f"Summary: {article.summary}")
    if article.content:
        parts.append(f"Body:\n{article.content[:MAX_BODY_CHARS]}")
    return "\n".join(parts)


class ArticleSummarizer:
    """Summarize stored articles, consulting the cache first.

    The generation service is only called on a cache miss. Concurrent misses
    for the same article may each generate; the last write wins. The cache is
    an optimization only, so its failures are logged and treated as misses.

    Args:
        store: Evidence store holding the articles.
        generator: Language service producing the digest.
        cache: Summary cache consulted before generating.
        params: Sampling parameters for the summary call.
        ttl: Lifetime of stored summaries (cache default when None).
        store_timeout: Seconds allowed for the article lookup.
    """

    def __init__(
        self,
        store: ArticleStore,
        generator: TextGenerator,
        cache: SummaryStore,
        *,
        params: GenerationParams = SUMMARY_PARAMS,
        ttl: timedelta | None = None,
        store_timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._generator = generator
        self._cache = cache
        self._params = params
        self._ttl = ttl
        self._store_timeout = store_timeout

    async def summarize(self, article_id: str) -> ArticleSummary:
        """Return the summary of ``article_id``.

        Raises:
            ArticleNotFoundError: If the store has no such article.
            SummarizationError: If the generation call fails.
        """
        t0 = time.monotonic()
        cached = self._cached(article_id)
        if cached is not None:
            logger.info("Summary cache hit for article %s", article_id)
            return ArticleSummary(
                article_id=cached.article_id,
                original_title=cached.original_title,
                summary=cached.summary,
                source_url=cached.source_url,
                cached=True,
                processing_time=time.monotonic() - t0,
            )

        try:
            article = await asyncio.wait_for(
                self._store.get_article(article_id), timeout=self._store_timeout
            )
        except TimeoutError as e:
            raise ServiceError("article lookup timed out") from e
        if article is None:
            raise ArticleNotFoundError(article_id)

        try:
            summary, usage = await self._generator.generate(
                system=SUMMARY_SYSTEM_PROMPT,
                prompt=build_summary_prompt(article),
                max_tokens=self._params.max_tokens,
                temperature=self._params.temperature,
            )
        except GenerationError as e:
            raise SummarizationError("failed to summarize article") from e

        summary = summary.strip()
        self._store_summary(article, summary)
        return ArticleSummary(
            article_id=article.id,
            original_title=article.title,
            summary=summary,
            source_url=article.source_url,
            cached=False,
            processing_time=time.monotonic() - t0,
            usage=usage,
        )

    def _cached(self, article_id: str) -> CachedSummary | None:
        try:
            return self._cache.get(article_id)
        except Exception as e:
            logger.warning("Summary cache read failed for %s. Error: %r", article_id, e)
            return None

    def _store_summary(self, article: Article, summary: str) -> None:
        try:
            self._cache.set(
                article.id,
                summary,
                original_title=article.title,
                source_url=article.source_url,
                ttl=self._ttl,
            )
        except Exception as e:
            logger.warning("Summary cache write failed for %s. Error: %r", article.id, e)
