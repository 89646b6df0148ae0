import os

import anthropic
from anthropic.types import WebSearchResultBlock

from orgwatch.data import APICallUsage, Usage, WebResult
from orgwatch.search.base import parse_timestamp
from orgwatch.url import extract_domain


class ClaudeSearchProvider:
    """Search the web using Claude's built-in web search tool.

    This uses Anthropic's server-side web search, so only the Claude API key
    is needed. Web search must be enabled in the Anthropic Console.

    Args:
        api_key: Anthropic API key (defaults to CLAUDE_API_KEY env var).
        model: Model to drive the search.
        max_searches: Max web searches per query (default: 1).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5-20251001",
        max_searches: int = 1,
        timeout: float = 30.0,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key, timeout=timeout)
        self._model = model
        self._max_searches = max_searches

    @property
    def name(self) -> str:
        return "claude"

    async def search(
        self, query: str, *, max_results: int = 10
    ) -> tuple[list[WebResult], Usage]:
        user_prompt = (
            f"Search the web for: {query}\n\n"
            f"Find up to {max_results} relevant, recent sources. "
            "List the title and URL of each source you found."
        )

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=1024,
            tools=[
                {
                    "type": "web_search_20250305",
                    "name": "web_search",
                    "max_uses": self._max_searches,
                }
            ],
            messages=[{"role": "user", "content": user_prompt}],
        )

        web_searches = 0
        server_tool_use = getattr(response.usage, "server_tool_use", None)
        if server_tool_use is not None:
            web_searches = getattr(server_tool_use, "web_search_requests", 0) or 0

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self._model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                    web_searches=web_searches,
                ),
            ],
            search_requests={self.name: 1},
        )

        results: list[WebResult] = []
        for block in response.content:
            if block.type == "web_search_tool_result":
                content = block.content
                if isinstance(content, list):
                    results.extend(self._parse_search_result(r) for r in content)

        return (results[:max_results], usage)

    def _parse_search_result(self, result: WebSearchResultBlock) -> WebResult:
        # encrypted_content is not human-readable, so there is no snippet
        return WebResult(
            title=result.title,
            url=result.url,
            snippet="",
            source=extract_domain(result.url),
            published_at=parse_timestamp(result.page_age),
        )
