"""Core data models for orgwatch."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from orgwatch.errors import InvalidQuestionError

MAX_QUESTION_LENGTH = 1000


class QueryType(StrEnum):
    """Coarse intent of a question, used to bias retrieval and ranking."""

    FINANCIAL = "financial"
    CONTRACTS = "contracts"
    GENERAL = "general"
    COMPARISON = "comparison"
    NEWS = "news"


class ResponseStrategy(StrEnum):
    """Evidence-sourcing policy chosen for a single request."""

    LOCAL_EVIDENCE = "local-evidence"
    WEB_AUGMENTED = "web-augmented"
    DIRECT_KNOWLEDGE = "direct-knowledge"
    REFUSED = "refused"


class EvidenceOrigin(StrEnum):
    """Where a piece of evidence came from."""

    LOCAL = "local"
    WEB = "web"


@dataclass(frozen=True)
class Question:
    """A validated natural-language question.

    Use ``Question.parse`` to build one from raw user input; it rejects empty
    and oversized text before any external call is made.
    """

    text: str
    org_hints: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str, org_hints: list[str] | None = None) -> "Question":
        if not text or not text.strip():
            raise InvalidQuestionError("question is required")
        if len(text) > MAX_QUESTION_LENGTH:
            raise InvalidQuestionError(
                f"question too long (max {MAX_QUESTION_LENGTH} characters)"
            )
        hints = tuple(h.strip() for h in (org_hints or []) if h and h.strip())
        return cls(text=text, org_hints=hints)


@dataclass(frozen=True)
class TimeWindow:
    """A time filter, either explicit or resolved from a named period."""

    start: datetime | None = None
    end: datetime | None = None
    period: str | None = None


@dataclass(frozen=True)
class QueryAnalysis:
    """Structured interpretation of a question."""

    query_type: QueryType = QueryType.GENERAL
    company_names: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    time_window: TimeWindow | None = None
    search_terms: tuple[str, ...] = ()


@dataclass(frozen=True)
class Article:
    """A news article as held by the evidence store."""

    id: str
    title: str
    summary: str = ""
    source_url: str = ""
    organizations: tuple[str, ...] = ()
    published_at: datetime | None = None
    relevance_score: float = 0.0
    feed_source: str = ""
    content: str = ""
    guid: str = ""


@dataclass(frozen=True)
class WebResult:
    """A raw result returned by a web search provider."""

    title: str
    url: str
    snippet: str = ""
    source: str = ""
    published_at: datetime | None = None


@dataclass(frozen=True)
class EvidenceItem:
    """A normalized unit of supporting material.

    Local articles and web results share this shape so that the synthesizer
    does not need to know where the material came from. ``relevance_score``
    is always clamped into [0, 1].
    """

    origin: EvidenceOrigin
    title: str
    url: str
    summary: str = ""
    source: str = ""
    published_at: datetime | None = None
    relevance_score: float = 0.0
    article_id: str | None = None
    organization: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "relevance_score", clamp_unit(self.relevance_score))

    @classmethod
    def from_article(cls, article: Article, relevance_score: float) -> "EvidenceItem":
        return cls(
            origin=EvidenceOrigin.LOCAL,
            title=article.title,
            url=article.source_url,
            summary=article.summary,
            source=article.feed_source,
            published_at=article.published_at,
            relevance_score=relevance_score,
            article_id=article.id,
            organization=article.organizations[0] if article.organizations else "Unknown",
        )

    @classmethod
    def from_web_result(cls, result: WebResult, relevance_score: float) -> "EvidenceItem":
        return cls(
            origin=EvidenceOrigin.WEB,
            title=result.title,
            url=result.url,
            summary=result.snippet,
            source=result.source,
            published_at=result.published_at,
            relevance_score=relevance_score,
        )


@dataclass(frozen=True)
class APICallUsage:
    """Usage from a single model call."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0
    web_searches: int = 0


@dataclass
class Usage:
    """Accumulated external usage across pipeline components."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    search_requests: dict[str, int] = field(default_factory=dict)

    @property
    def input_tokens(self) -> int:
        return sum(c.input_tokens for c in self.api_calls)

    @property
    def output_tokens(self) -> int:
        return sum(c.output_tokens for c in self.api_calls)

    @property
    def web_searches(self) -> int:
        return sum(c.web_searches for c in self.api_calls)

    @property
    def total_search_requests(self) -> int:
        return sum(self.search_requests.values())

    def __add__(self, other: "Usage") -> "Usage":
        merged = dict(self.search_requests)
        for name, count in other.search_requests.items():
            merged[name] = merged.get(name, 0) + count
        return Usage(api_calls=self.api_calls + other.api_calls, search_requests=merged)

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        for name, count in other.search_requests.items():
            self.search_requests[name] = self.search_requests.get(name, 0) + count
        return self


@dataclass(frozen=True)
class QueryResponse:
    """Final answer returned to the caller."""

    answer: str
    evidence: tuple[EvidenceItem, ...]
    strategy: ResponseStrategy
    confidence: float
    processing_time: float
    companies_referenced: tuple[str, ...] = ()
    usage: Usage = field(default_factory=Usage)

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_unit(self.confidence))


@dataclass(frozen=True)
class CachedSummary:
    """A generated article digest held by the summary cache."""

    article_id: str
    summary: str
    original_title: str
    source_url: str
    cached_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class ArticleSummary:
    """Result of a summarize-article request."""

    article_id: str
    original_title: str
    summary: str
    source_url: str
    cached: bool
    processing_time: float
    usage: Usage = field(default_factory=Usage)


def clamp_unit(value: float) -> float:
    """Clamp a score into [0.0, 1.0]."""
    return max(0.0, min(1.0, float(value)))
