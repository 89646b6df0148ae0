import logging
import os

import anthropic
from anthropic.types import TextBlock

from orgwatch.data import APICallUsage, Usage
from orgwatch.errors import GenerationError

logger = logging.getLogger(__name__)


class ClaudeTextGenerator:
    """Generate text using Anthropic's Claude API.

    Every call is bounded by ``timeout``; a timeout surfaces as a
    ``GenerationError`` exactly like any other transport failure.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        timeout: Per-request timeout in seconds.
        max_retries: Retries performed by the SDK on transient errors.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
    ) -> None:
        self._model = model
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(
            api_key=resolved_key,
            timeout=timeout,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        *,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, Usage]:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise GenerationError(f"Claude request failed: {e}") from e

        usage = Usage(
            api_calls=[
                APICallUsage(
                    model=self._model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                    cache_creation_input_tokens=getattr(
                        response.usage, "cache_creation_input_tokens", 0
                    )
                    or 0,
                    cache_read_input_tokens=getattr(response.usage, "cache_read_input_tokens", 0)
                    or 0,
                ),
            ],
        )

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock))
        if not text.strip():
            raise GenerationError("Claude returned no text content")
        return (text, usage)
