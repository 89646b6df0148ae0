"""Local evidence retrieval."""

from orgwatch.retrieval.retriever import ContextRetriever, rank_articles, score_article

__all__ = [
    "ContextRetriever",
    "rank_articles",
    "score_article",
]
