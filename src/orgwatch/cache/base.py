from datetime import timedelta
from typing import Protocol

from orgwatch.data import CachedSummary


class SummaryStore(Protocol):
    """Interface for a time-boxed store of generated article summaries."""

    def get(self, article_id: str) -> CachedSummary | None:
        """Return the live entry for ``article_id``, or None on a miss.

        An expired entry is a miss and is removed.
        """
        ...

    def set(
        self,
        article_id: str,
        summary: str,
        *,
        original_title: str,
        source_url: str,
        ttl: timedelta | None = None,
    ) -> CachedSummary:
        """Store a summary, replacing any existing entry."""
        ...

    def delete(self, article_id: str) -> None: ...

    def clear(self) -> None: ...

    def stats(self) -> dict[str, int]:
        """Counts of total, active and expired entries."""
        ...
