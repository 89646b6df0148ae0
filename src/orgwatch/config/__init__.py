"""Configuration module for orgwatch."""

from orgwatch.config.factory import create_from_config, create_pipeline
from orgwatch.config.loader import get_default_config_path, load_config
from orgwatch.config.models import (
    AugmenterConfig,
    CacheConfig,
    ClaudeGenerationConfig,
    ClaudeProviderConfig,
    DuckDuckGoProviderConfig,
    ExaProviderConfig,
    GateConfig,
    GNewsProviderConfig,
    GoogleProviderConfig,
    HeuristicAnalyzerConfig,
    LLMAnalyzerConfig,
    LoggingConfig,
    OrgWatchConfig,
    ProviderConfig,
    RetrievalConfig,
    RosterConfig,
    StoreConfig,
)

__all__ = [
    "AugmenterConfig",
    "CacheConfig",
    "ClaudeGenerationConfig",
    "ClaudeProviderConfig",
    "DuckDuckGoProviderConfig",
    "ExaProviderConfig",
    "GNewsProviderConfig",
    "GoogleProviderConfig",
    "GateConfig",
    "HeuristicAnalyzerConfig",
    "LLMAnalyzerConfig",
    "LoggingConfig",
    "OrgWatchConfig",
    "ProviderConfig",
    "RetrievalConfig",
    "RosterConfig",
    "StoreConfig",
    "create_from_config",
    "create_pipeline",
    "get_default_config_path",
    "load_config",
]
