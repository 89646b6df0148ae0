"""Factory functions to create components from configuration."""

from datetime import timedelta
from pathlib import Path

from orgwatch.augment import CREDIBLE_DOMAINS, ExternalKnowledgeAugmenter
from orgwatch.cache import ArticleSummarizer, SummaryCache
from orgwatch.config.models import (
    AugmenterConfig,
    ClaudeGenerationConfig,
    ClaudeProviderConfig,
    DuckDuckGoProviderConfig,
    ExaProviderConfig,
    GenerationParamsConfig,
    GNewsProviderConfig,
    GoogleProviderConfig,
    HeuristicAnalyzerConfig,
    LLMAnalyzerConfig,
    OrgWatchConfig,
    ProviderConfig,
    RosterConfig,
)
from orgwatch.gate import ConfidenceGate
from orgwatch.generation import ClaudeTextGenerator, GenerationParams, TextGenerator
from orgwatch.pipeline import QueryPipeline
from orgwatch.query import HeuristicQueryAnalyzer, LLMQueryAnalyzer
from orgwatch.query.base import QueryAnalyzer
from orgwatch.retrieval import ContextRetriever
from orgwatch.roster import Organization, Roster
from orgwatch.run_logger import RunLogger
from orgwatch.scope import DEFAULT_DOMAIN_TERMS, DEFAULT_ROLE_TERMS, ScopeChecker
from orgwatch.search import (
    ClaudeSearchProvider,
    DuckDuckGoProvider,
    ExaProvider,
    GNewsProvider,
    GoogleSearchProvider,
    WebSearchProvider,
)
from orgwatch.store import ArticleStore, InMemoryArticleStore, load_articles
from orgwatch.synthesis import ResponseSynthesizer


def _params(config: GenerationParamsConfig) -> GenerationParams:
    return GenerationParams(max_tokens=config.max_tokens, temperature=config.temperature)


def create_roster(config: RosterConfig) -> Roster:
    """Create the tracked-organization roster (built-in default when unset)."""
    if config.organizations is None:
        return Roster.default()
    return Roster(
        [
            Organization(
                name=org.name,
                aliases=tuple(org.aliases),
                ticker=org.ticker or "",
                industry=org.industry or "",
                website=org.website or "",
            )
            for org in config.organizations
        ]
    )


def create_scope(config: RosterConfig, roster: Roster) -> ScopeChecker:
    return ScopeChecker(
        roster,
        roster,
        domain_terms=tuple(config.domain_terms)
        if config.domain_terms is not None
        else DEFAULT_DOMAIN_TERMS,
        role_terms=tuple(config.role_terms)
        if config.role_terms is not None
        else DEFAULT_ROLE_TERMS,
    )


def create_generator(config: ClaudeGenerationConfig) -> TextGenerator:
    """Create the text generator from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, ClaudeGenerationConfig):
        return ClaudeTextGenerator(
            model=config.model,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
        )
    msg = f"Unknown generation config type: {type(config)}"
    raise ValueError(msg)


def create_analyzer(
    config: LLMAnalyzerConfig | HeuristicAnalyzerConfig,
    generation: ClaudeGenerationConfig,
    generator: TextGenerator,
    roster: Roster,
) -> QueryAnalyzer:
    """Create a query analyzer from config."""
    if isinstance(config, LLMAnalyzerConfig):
        return LLMQueryAnalyzer(
            generator,
            roster,
            params=_params(generation.analysis),
            system_prompt=generation.analysis_system_prompt,
        )
    if isinstance(config, HeuristicAnalyzerConfig):
        return HeuristicQueryAnalyzer(roster)
    msg = f"Unknown analyzer config type: {type(config)}"
    raise ValueError(msg)


def create_provider(config: ProviderConfig) -> WebSearchProvider:
    """Create a web search provider from config."""
    if isinstance(config, DuckDuckGoProviderConfig):
        return DuckDuckGoProvider(timeout=config.timeout_seconds)
    if isinstance(config, GNewsProviderConfig):
        return GNewsProvider(lang=config.lang, timeout=config.timeout_seconds)
    if isinstance(config, GoogleProviderConfig):
        return GoogleSearchProvider(
            date_restrict=config.date_restrict, timeout=config.timeout_seconds
        )
    if isinstance(config, ExaProviderConfig):
        return ExaProvider()
    if isinstance(config, ClaudeProviderConfig):
        return ClaudeSearchProvider(
            model=config.model,
            max_searches=config.max_searches,
            timeout=config.timeout_seconds,
        )
    # Type checker ensures this is exhaustive
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_augmenter(
    config: AugmenterConfig, scope: ScopeChecker, roster: Roster
) -> ExternalKnowledgeAugmenter | None:
    """Create the web augmenter, or None when web search is disabled."""
    if not config.enabled or not config.providers:
        return None
    credible = (
        frozenset(d.lower() for d in config.credible_domains)
        if config.credible_domains is not None
        else CREDIBLE_DOMAINS
    )
    return ExternalKnowledgeAugmenter(
        [create_provider(p) for p in config.providers],
        scope,
        roster,
        top_k=config.top_k,
        max_results_per_provider=config.max_results_per_provider,
        recent_days=config.recent_days,
        timeout=config.timeout_seconds,
        qualifier_terms=tuple(config.qualifier_terms),
        credible_domains=credible,
    )


def create_store(config: OrgWatchConfig) -> ArticleStore:
    """Create the in-memory article store, seeded from YAML when configured."""
    if config.store.articles_path is None:
        return InMemoryArticleStore()
    return InMemoryArticleStore(load_articles(config.store.articles_path))


def create_pipeline(
    config: OrgWatchConfig,
    *,
    store: ArticleStore | None = None,
    generator: TextGenerator | None = None,
    run_logger: RunLogger | None = None,
) -> QueryPipeline:
    """Wire a QueryPipeline from config.

    ``store`` and ``generator`` replace the configured collaborators when given.
    """
    roster = create_roster(config.roster)
    scope = create_scope(config.roster, roster)
    store = store if store is not None else create_store(config)
    generator = generator if generator is not None else create_generator(config.generation)

    cache = SummaryCache(
        ttl=timedelta(hours=config.cache.ttl_hours),
        sweep_interval=config.cache.sweep_interval_seconds,
    )
    return QueryPipeline(
        analyzer=create_analyzer(config.analyzer, config.generation, generator, roster),
        retriever=ContextRetriever(
            store,
            default_window_days=config.retrieval.default_window_days,
            page_size=config.retrieval.page_size,
            top_k=config.retrieval.top_k,
            max_concurrency=config.retrieval.max_concurrency,
            timeout=config.retrieval.timeout_seconds,
        ),
        gate=ConfidenceGate(
            scope,
            min_evidence=config.gate.min_evidence,
            min_mean_relevance=config.gate.min_mean_relevance,
        ),
        augmenter=create_augmenter(config.augmenter, scope, roster),
        synthesizer=ResponseSynthesizer(
            generator,
            list(roster.names),
            params=_params(config.generation.synthesis),
            direct_params=_params(config.generation.direct),
        ),
        summarizer=ArticleSummarizer(
            store,
            generator,
            cache,
            params=_params(config.generation.summary),
            store_timeout=config.retrieval.timeout_seconds,
        ),
        cache=cache,
        roster=roster,
        run_logger=run_logger,
    )


def create_from_config(
    config: OrgWatchConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
    store: ArticleStore | None = None,
    generator: TextGenerator | None = None,
) -> tuple[QueryPipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.
        store: Article store to use instead of the configured one.
        generator: Text generator to use instead of the configured one.

    Returns:
        Tuple of (pipeline, run_logger). run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    pipeline = create_pipeline(config, store=store, generator=generator, run_logger=run_logger)
    return (pipeline, run_logger)
