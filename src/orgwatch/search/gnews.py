import os

import httpx

from orgwatch.data import Usage, WebResult
from orgwatch.search.base import parse_timestamp

GNEWS_API_URL = "https://gnews.io/api/v4/search"


class GNewsProvider:
    """Search for news articles using the GNews API.

    Args:
        api_key: GNews API key (defaults to GNEWS_API_KEY env var).
        lang: Language code for results (default: "en").
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        lang: str = "en",
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("GNEWS_API_KEY")
        if not self._api_key:
            raise ValueError("GNews API key required. Pass api_key or set GNEWS_API_KEY env var.")
        self._lang = lang
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "gnews"

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        params: dict[str, str | int] = {
            "q": query,
            "lang": self._lang,
            "max": min(max_results, 100),  # GNews max is 100
            "apikey": self._api_key,  # type: ignore[dict-item]
        }

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(GNEWS_API_URL, params=params)
            response.raise_for_status()
            data = response.json()

        results: list[WebResult] = []
        for item in data.get("articles", []):
            results.append(
                WebResult(
                    title=item.get("title", ""),
                    url=item.get("url", ""),
                    snippet=item.get("description") or "",
                    source=item.get("source", {}).get("name", "Unknown"),
                    published_at=parse_timestamp(item.get("publishedAt")),
                )
            )
        return (results, Usage(search_requests={self.name: 1}))
