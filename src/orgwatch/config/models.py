"""Pydantic configuration models for orgwatch components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

# ============================================================
# Generation Config
# ============================================================


class GenerationParamsConfig(BaseModel):
    """Sampling parameters for one kind of generation call."""

    max_tokens: int = Field(gt=0)
    temperature: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}


class ClaudeGenerationConfig(BaseModel):
    """Configuration for the Claude-backed text generator and its call types."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    timeout_seconds: float = 30.0
    max_retries: int = 2
    analysis: GenerationParamsConfig = GenerationParamsConfig(max_tokens=200, temperature=0.1)
    synthesis: GenerationParamsConfig = GenerationParamsConfig(max_tokens=500, temperature=0.3)
    direct: GenerationParamsConfig = GenerationParamsConfig(max_tokens=300, temperature=0.3)
    summary: GenerationParamsConfig = GenerationParamsConfig(max_tokens=300, temperature=0.2)
    analysis_system_prompt: str | None = None

    model_config = {"frozen": True}


# ============================================================
# Analyzer Config
# ============================================================


class LLMAnalyzerConfig(BaseModel):
    """Model-assisted analysis with heuristic fallback."""

    type: Literal["llm"] = "llm"

    model_config = {"frozen": True}


class HeuristicAnalyzerConfig(BaseModel):
    """Keyword-only analysis with no model call."""

    type: Literal["heuristic"] = "heuristic"

    model_config = {"frozen": True}


AnalyzerConfig = Annotated[
    LLMAnalyzerConfig | HeuristicAnalyzerConfig,
    Field(discriminator="type"),
]


# ============================================================
# Retrieval / Gate Configs
# ============================================================


class RetrievalConfig(BaseModel):
    """Configuration for the ContextRetriever."""

    default_window_days: int = Field(default=90, gt=0)
    page_size: int = Field(default=20, ge=1, le=1000)
    top_k: int = Field(default=10, ge=1)
    max_concurrency: int = Field(default=4, ge=1)
    timeout_seconds: float = 10.0

    model_config = {"frozen": True}


class GateConfig(BaseModel):
    """Thresholds for answering from local evidence."""

    min_evidence: int = Field(default=3, ge=1)
    min_mean_relevance: float = Field(default=0.6, ge=0.0, le=1.0)

    model_config = {"frozen": True}


# ============================================================
# Search Provider Configs
# ============================================================


class DuckDuckGoProviderConfig(BaseModel):
    """Configuration for DuckDuckGoProvider."""

    type: Literal["duckduckgo"] = "duckduckgo"
    timeout_seconds: float = 10.0

    model_config = {"frozen": True}


class GNewsProviderConfig(BaseModel):
    """Configuration for GNewsProvider."""

    type: Literal["gnews"] = "gnews"
    lang: str = "en"
    timeout_seconds: float = 10.0

    model_config = {"frozen": True}


class GoogleProviderConfig(BaseModel):
    """Configuration for GoogleSearchProvider."""

    type: Literal["google"] = "google"
    date_restrict: str | None = "y1"
    timeout_seconds: float = 10.0

    model_config = {"frozen": True}


class ExaProviderConfig(BaseModel):
    """Configuration for ExaProvider."""

    type: Literal["exa"] = "exa"

    model_config = {"frozen": True}


class ClaudeProviderConfig(BaseModel):
    """Configuration for ClaudeSearchProvider."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    max_searches: int = 1
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    DuckDuckGoProviderConfig
    | GNewsProviderConfig
    | GoogleProviderConfig
    | ExaProviderConfig
    | ClaudeProviderConfig,
    Field(discriminator="type"),
]


class AugmenterConfig(BaseModel):
    """Configuration for the ExternalKnowledgeAugmenter."""

    enabled: bool = True
    providers: list[ProviderConfig] = Field(
        default_factory=lambda: [DuckDuckGoProviderConfig()]
    )
    top_k: int = Field(default=5, ge=1)
    max_results_per_provider: int = Field(default=10, ge=1)
    recent_days: int = Field(default=30, gt=0)
    timeout_seconds: float = 10.0
    qualifier_terms: list[str] = Field(default_factory=lambda: ["defense", "aerospace"])
    credible_domains: list[str] | None = None

    model_config = {"frozen": True}


# ============================================================
# Cache / Roster / Store Configs
# ============================================================


class CacheConfig(BaseModel):
    """Configuration for the summary cache."""

    ttl_hours: float = Field(default=24.0, gt=0)
    sweep_interval_seconds: float = Field(default=300.0, gt=0)

    model_config = {"frozen": True}


class OrganizationConfig(BaseModel):
    """One tracked organization."""

    name: str
    aliases: list[str] = Field(default_factory=list)
    ticker: str | None = None
    industry: str | None = None
    website: str | None = None

    model_config = {"frozen": True}


class RosterConfig(BaseModel):
    """Tracked organizations and scope vocabulary (defaults when unset)."""

    organizations: list[OrganizationConfig] | None = None
    domain_terms: list[str] | None = None
    role_terms: list[str] | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_organizations(self) -> "RosterConfig":
        if self.organizations is not None and not self.organizations:
            raise ValueError("roster.organizations must not be empty")
        return self


class StoreConfig(BaseModel):
    """Seed file for the in-memory article store."""

    articles_path: str | None = None

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-query run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class OrgWatchConfig(BaseModel):
    """Root configuration for orgwatch."""

    generation: ClaudeGenerationConfig = Field(default_factory=ClaudeGenerationConfig)
    analyzer: LLMAnalyzerConfig | HeuristicAnalyzerConfig = Field(
        default_factory=LLMAnalyzerConfig, discriminator="type"
    )
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    augmenter: AugmenterConfig = Field(default_factory=AugmenterConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    roster: RosterConfig = Field(default_factory=RosterConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
