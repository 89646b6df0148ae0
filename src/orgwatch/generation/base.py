from dataclasses import dataclass
from typing import Protocol

from orgwatch.data import Usage


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters for one kind of generation call."""

    max_tokens: int
    temperature: float


ANALYSIS_PARAMS = GenerationParams(max_tokens=200, temperature=0.1)
SYNTHESIS_PARAMS = GenerationParams(max_tokens=500, temperature=0.3)
DIRECT_PARAMS = GenerationParams(max_tokens=300, temperature=0.3)
SUMMARY_PARAMS = GenerationParams(max_tokens=300, temperature=0.2)


class TextGenerator(Protocol):
    """Interface for a generative language service."""

    async def generate(
        self,
        *,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> tuple[str, Usage]:
        """Produce text for a single system/user prompt pair.

        Raises:
            GenerationError: If the service is unreachable, times out, or
                returns no text.
        """
        ...
