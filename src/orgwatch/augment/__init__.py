"""External knowledge augmentation via web search."""

from orgwatch.augment.augmenter import ExternalKnowledgeAugmenter
from orgwatch.augment.credibility import CREDIBLE_DOMAINS, is_credible_source

__all__ = [
    "CREDIBLE_DOMAINS",
    "ExternalKnowledgeAugmenter",
    "is_credible_source",
]
