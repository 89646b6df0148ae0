"""Data models for orgwatch."""

from orgwatch.data.models import (
    MAX_QUESTION_LENGTH,
    APICallUsage,
    Article,
    ArticleSummary,
    CachedSummary,
    EvidenceItem,
    EvidenceOrigin,
    QueryAnalysis,
    QueryResponse,
    QueryType,
    Question,
    ResponseStrategy,
    TimeWindow,
    Usage,
    WebResult,
    clamp_unit,
)

__all__ = [
    "MAX_QUESTION_LENGTH",
    "APICallUsage",
    "Article",
    "ArticleSummary",
    "CachedSummary",
    "EvidenceItem",
    "EvidenceOrigin",
    "QueryAnalysis",
    "QueryResponse",
    "QueryType",
    "Question",
    "ResponseStrategy",
    "TimeWindow",
    "Usage",
    "WebResult",
    "clamp_unit",
]
