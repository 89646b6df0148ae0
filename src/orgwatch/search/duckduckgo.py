"""DuckDuckGo Instant Answer search (no API key required)."""

import httpx

from orgwatch.data import Usage, WebResult

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
TITLE_LENGTH = 100


class DuckDuckGoProvider:
    """Search using DuckDuckGo's Instant Answer API.

    Related topics become results; when there are none, the abstract (if
    any) is returned as a single result.

    Args:
        timeout: HTTP timeout in seconds.
        user_agent: User-Agent header sent with each request.
    """

    def __init__(self, *, timeout: float = 10.0, user_agent: str = "orgwatch/0.1") -> None:
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "duckduckgo"

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        params = {"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"}
        headers = {"User-Agent": self._user_agent}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(DUCKDUCKGO_API_URL, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()

        results: list[WebResult] = []
        for topic in _flatten_topics(data.get("RelatedTopics", [])):
            text = topic.get("Text", "")
            if not text:
                continue
            results.append(
                WebResult(
                    title=text[:TITLE_LENGTH],
                    url=topic.get("FirstURL", ""),
                    snippet=text,
                    source="DuckDuckGo",
                )
            )

        if not results and data.get("Abstract"):
            results.append(
                WebResult(
                    title=data.get("Heading", ""),
                    url=data.get("AbstractURL", ""),
                    snippet=data["Abstract"],
                    source=data.get("AbstractSource", "DuckDuckGo"),
                )
            )

        return (results[:max_results], Usage(search_requests={self.name: 1}))


def _flatten_topics(topics: list[dict]) -> list[dict]:
    """Related topics may be grouped under ``Topics``; flatten one level."""
    flat: list[dict] = []
    for topic in topics:
        if "Topics" in topic:
            flat.extend(topic.get("Topics", []))
        else:
            flat.append(topic)
    return flat
