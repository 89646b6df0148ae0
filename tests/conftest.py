"""Shared fakes and fixtures."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from orgwatch.data import APICallUsage, Article, Usage, WebResult
from orgwatch.errors import GenerationError
from orgwatch.roster import Roster
from orgwatch.scope import ScopeChecker
from orgwatch.store import InMemoryArticleStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FakeTextGenerator:
    """TextGenerator double that records calls.

    ``reply`` is either a fixed string or a callable receiving the call
    kwargs. ``error`` makes every call raise it instead.
    """

    def __init__(
        self,
        reply: str | Callable[[dict[str, Any]], str] = "answer",
        *,
        error: Exception | None = None,
        model: str = "fake-model",
    ) -> None:
        self._reply = reply
        self._error = error
        self._model = model
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(
        self,
        *,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, Usage]:
        kwargs = {
            "system": system,
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        text = self._reply(kwargs) if callable(self._reply) else self._reply
        usage = Usage(api_calls=[APICallUsage(model=self._model, input_tokens=10, output_tokens=5)])
        return (text, usage)


class FakeSearchProvider:
    """WebSearchProvider double returning canned results or raising."""

    def __init__(
        self,
        results: list[WebResult] | None = None,
        *,
        name: str = "fake",
        error: Exception | None = None,
    ) -> None:
        self._results = results or []
        self._name = name
        self._error = error
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def search(self, query: str, *, max_results: int = 10) -> tuple[list[WebResult], Usage]:
        self.queries.append(query)
        if self._error is not None:
            raise self._error
        return (self._results[:max_results], Usage(search_requests={self._name: 1}))


def make_article(
    article_id: str,
    title: str = "Defense news",
    *,
    organizations: tuple[str, ...] = ("Raytheon Technologies",),
    relevance: float = 0.8,
    published_at: datetime | None = None,
    summary: str = "",
) -> Article:
    return Article(
        id=article_id,
        title=title,
        summary=summary or f"Summary of {title}",
        source_url=f"https://example.com/{article_id}",
        organizations=organizations,
        published_at=published_at or NOW - timedelta(days=5),
        relevance_score=relevance,
        feed_source="Example Feed",
    )


def failing_generator() -> FakeTextGenerator:
    return FakeTextGenerator(error=GenerationError("service unavailable"))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def roster() -> Roster:
    return Roster.default()


@pytest.fixture
def scope(roster: Roster) -> ScopeChecker:
    return ScopeChecker(roster, roster)


@pytest.fixture
def store() -> InMemoryArticleStore:
    return InMemoryArticleStore()
