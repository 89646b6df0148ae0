"""orgwatch: answer questions about tracked organizations from news evidence."""

from orgwatch.augment import ExternalKnowledgeAugmenter
from orgwatch.cache import ArticleSummarizer, SummaryCache, SummaryStore
from orgwatch.config import OrgWatchConfig, create_from_config, load_config
from orgwatch.data import (
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
)
from orgwatch.errors import (
    AnalysisError,
    ArticleNotFoundError,
    GenerationError,
    InvalidQuestionError,
    OrgWatchError,
    OutOfScopeError,
    ServiceError,
    SummarizationError,
    SynthesisError,
    user_message,
)
from orgwatch.gate import ConfidenceGate
from orgwatch.generation import ClaudeTextGenerator, TextGenerator
from orgwatch.pipeline import QueryPipeline, QueryService
from orgwatch.query import HeuristicQueryAnalyzer, LLMQueryAnalyzer, QueryAnalyzer
from orgwatch.retrieval import ContextRetriever
from orgwatch.roster import Organization, OrganizationDirectory, Roster
from orgwatch.run_logger import RunLogger
from orgwatch.scope import ScopeChecker
from orgwatch.search import (
    ClaudeSearchProvider,
    DuckDuckGoProvider,
    ExaProvider,
    GNewsProvider,
    WebSearchProvider,
)
from orgwatch.store import ArticleFilter, ArticleStore, InMemoryArticleStore
from orgwatch.synthesis import ResponseSynthesizer
from orgwatch.url import extract_domain

__all__ = [
    # Models
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
    # Errors
    "AnalysisError",
    "ArticleNotFoundError",
    "GenerationError",
    "InvalidQuestionError",
    "OrgWatchError",
    "OutOfScopeError",
    "ServiceError",
    "SummarizationError",
    "SynthesisError",
    "user_message",
    # Functions
    "extract_domain",
    # Protocols
    "ArticleStore",
    "OrganizationDirectory",
    "QueryAnalyzer",
    "QueryService",
    "SummaryStore",
    "TextGenerator",
    "WebSearchProvider",
    # Components
    "ArticleFilter",
    "ArticleSummarizer",
    "ConfidenceGate",
    "ContextRetriever",
    "ExternalKnowledgeAugmenter",
    "HeuristicQueryAnalyzer",
    "InMemoryArticleStore",
    "LLMQueryAnalyzer",
    "Organization",
    "ResponseSynthesizer",
    "Roster",
    "ScopeChecker",
    "SummaryCache",
    # Generators
    "ClaudeTextGenerator",
    # Providers
    "ClaudeSearchProvider",
    "DuckDuckGoProvider",
    "ExaProvider",
    "GNewsProvider",
    # Pipeline
    "QueryPipeline",
    # Logging
    "RunLogger",
    # Config
    "OrgWatchConfig",
    "create_from_config",
    "load_config",
]
