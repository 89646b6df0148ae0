"""Exa search using the official exa-py SDK."""

import os

from exa_py import AsyncExa

from orgwatch.data import Usage, WebResult
from orgwatch.search.base import parse_timestamp
from orgwatch.url import extract_domain


class ExaProvider:
    """Search for content using the Exa API.

    Uses the ``exa-py`` async SDK. Results carry title, URL, published date
    and, when Exa supplies highlights, a snippet.

    Args:
        api_key: Exa API key (defaults to EXA_API_KEY env var).
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        self._api_key = api_key or os.environ.get("EXA_API_KEY")
        if not self._api_key:
            raise ValueError("Exa API key required. Pass api_key or set EXA_API_KEY env var.")
        self._client = AsyncExa(api_key=self._api_key)

    @property
    def name(self) -> str:
        return "exa"

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        response = await self._client.search(query, num_results=max_results)

        results: list[WebResult] = []
        for result in response.results:
            highlights = getattr(result, "highlights", None) or []
            results.append(
                WebResult(
                    title=result.title or "",
                    url=result.url,
                    snippet=" ".join(h for h in highlights if isinstance(h, str)),
                    source=extract_domain(result.url),
                    published_at=parse_timestamp(result.published_date),
                )
            )
        return (results, Usage(search_requests={self.name: 1}))
