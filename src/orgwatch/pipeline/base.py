"""Service protocol consumed by the request layer."""

from typing import Protocol

from orgwatch.data import ArticleSummary, QueryResponse


class QueryService(Protocol):
    """Interface for answering questions about the tracked organizations."""

    async def process_query(
        self,
        question: str,
        org_hints: list[str] | None = None,
    ) -> QueryResponse:
        """Answer a natural-language question.

        Args:
            question: Raw question text (1-1000 characters).
            org_hints: Optional organization names supplied by the caller.

        Returns:
            The answer with its evidence, strategy, and confidence.

        Raises:
            InvalidQuestionError: If the question is empty or too long.
            ServiceError: If analysis or synthesis fails.
        """
        ...

    async def summarize_article(self, article_id: str) -> ArticleSummary:
        """Return a cached or freshly generated digest of a stored article."""
        ...

    def cache_stats(self) -> dict[str, int]:
        """Counts of total, active and expired summary cache entries."""
        ...
