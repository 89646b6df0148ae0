import os

import httpx

from orgwatch.data import Usage, WebResult
from orgwatch.search.base import parse_timestamp
from orgwatch.url import extract_domain

GOOGLE_SEARCH_API_URL = "https://www.googleapis.com/customsearch/v1"


class GoogleSearchProvider:
    """Search the web using the Google Custom Search JSON API.

    Args:
        api_key: API key (defaults to GOOGLE_SEARCH_API_KEY env var).
        engine_id: Programmable Search Engine id (defaults to
            GOOGLE_SEARCH_ENGINE_ID env var).
        date_restrict: Recency restriction passed as ``dateRestrict``
            (e.g. "y1" for the last year). None disables it.
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        engine_id: str | None = None,
        date_restrict: str | None = "y1",
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("GOOGLE_SEARCH_API_KEY")
        if not self._api_key:
            raise ValueError(
                "Google API key required. Pass api_key or set GOOGLE_SEARCH_API_KEY env var."
            )
        self._engine_id = engine_id or os.environ.get("GOOGLE_SEARCH_ENGINE_ID")
        if not self._engine_id:
            raise ValueError(
                "Search engine id required. Pass engine_id or set GOOGLE_SEARCH_ENGINE_ID env var."
            )
        self._date_restrict = date_restrict
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "google"

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        params: dict[str, str | int] = {
            "key": self._api_key,  # type: ignore[dict-item]
            "cx": self._engine_id,  # type: ignore[dict-item]
            "q": query,
            "num": max(1, min(max_results, 10)),  # API max is 10 per page
        }
        if self._date_restrict:
            params["dateRestrict"] = self._date_restrict

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(GOOGLE_SEARCH_API_URL, params=params)
            response.raise_for_status()
            data = response.json()

        results: list[WebResult] = []
        for item in data.get("items", []):
            link = item.get("link", "")
            results.append(
                WebResult(
                    title=item.get("title", ""),
                    url=link,
                    snippet=item.get("snippet") or "",
                    source=item.get("displayLink") or extract_domain(link),
                    published_at=parse_timestamp(_published_time(item)),
                )
            )
        return (results, Usage(search_requests={self.name: 1}))


def _published_time(item: dict) -> str | None:
    for tags in item.get("pagemap", {}).get("metatags", []):
        value = tags.get("article:published_time")
        if value:
            return value
    return None
