from typing import Protocol

from orgwatch.data import QueryAnalysis, Usage


class QueryAnalyzer(Protocol):
    """Interface for turning a free-text question into a structured intent."""

    async def analyze(self, question: str) -> tuple[QueryAnalysis, Usage]: ...
