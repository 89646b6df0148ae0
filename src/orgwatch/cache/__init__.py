from orgwatch.cache.base import SummaryStore
from orgwatch.cache.memory import DEFAULT_SWEEP_INTERVAL, DEFAULT_TTL, SummaryCache
from orgwatch.cache.summarizer import SUMMARY_SYSTEM_PROMPT, ArticleSummarizer

__all__ = [
    "ArticleSummarizer",
    "DEFAULT_SWEEP_INTERVAL",
    "DEFAULT_TTL",
    "SUMMARY_SYSTEM_PROMPT",
    "SummaryCache",
    "SummaryStore",
]
