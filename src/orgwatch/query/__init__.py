from orgwatch.query.base import QueryAnalyzer
from orgwatch.query.heuristic import HeuristicQueryAnalyzer, heuristic_analysis, resolve_period
from orgwatch.query.llm import DEFAULT_SYSTEM_PROMPT, LLMQueryAnalyzer

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "HeuristicQueryAnalyzer",
    "LLMQueryAnalyzer",
    "QueryAnalyzer",
    "heuristic_analysis",
    "resolve_period",
]
