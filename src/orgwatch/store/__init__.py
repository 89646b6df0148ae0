"""Evidence store collaborator."""

from orgwatch.store.base import ArticleFilter, ArticleStore
from orgwatch.store.memory import InMemoryArticleStore, article_from_dict, load_articles

__all__ = [
    "ArticleFilter",
    "ArticleStore",
    "InMemoryArticleStore",
    "article_from_dict",
    "load_articles",
]
