from orgwatch.search.base import WebSearchProvider, parse_timestamp
from orgwatch.search.claude import ClaudeSearchProvider
from orgwatch.search.duckduckgo import DuckDuckGoProvider
from orgwatch.search.exa import ExaProvider
from orgwatch.search.gnews import GNewsProvider
from orgwatch.search.google import GoogleSearchProvider

__all__ = [
    "ClaudeSearchProvider",
    "DuckDuckGoProvider",
    "ExaProvider",
    "GNewsProvider",
    "GoogleSearchProvider",
    "WebSearchProvider",
    "parse_timestamp",
]
