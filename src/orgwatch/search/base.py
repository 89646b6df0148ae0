from datetime import UTC, datetime
from typing import Protocol

from orgwatch.data import Usage, WebResult


class WebSearchProvider(Protocol):
    """Interface for a web search backend."""

    @property
    def name(self) -> str:
        """Short provider label used in logs and usage accounting."""
        ...

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        """Search the web for ``query``.

        Args:
            query: Search text.
            max_results: Maximum results to return.

        Returns:
            Tuple of (results, usage).
        """
        ...


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp from a provider payload, or return None."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
