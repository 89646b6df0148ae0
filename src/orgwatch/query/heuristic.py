"""Keyword heuristics for query analysis.

These run on the raw question text and never call an external service. The
model-assisted analyzer falls back to them field by field whenever the model
output is missing or malformed.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from orgwatch.data import QueryAnalysis, QueryType, TimeWindow, Usage
from orgwatch.roster import Roster, contains_term

RECENT_DAYS = 30

_QUERY_TYPE_TERMS: tuple[tuple[QueryType, tuple[str, ...]], ...] = (
    (
        QueryType.FINANCIAL,
        (
            "quarter",
            "quarterly",
            "earnings",
            "revenue",
            "financial",
            "financials",
            "profit",
            "sales",
            "guidance",
            "stock",
        ),
    ),
    (QueryType.CONTRACTS, ("contract", "contracts", "award", "awarded", "deal", "deals")),
    (QueryType.COMPARISON, ("compare", "comparison", "versus", "vs")),
    (QueryType.NEWS, ("news", "latest", "announce", "announced", "announcement", "headlines")),
)

_PERIOD_PHRASES: tuple[tuple[str, str], ...] = (
    ("this quarter", "this_quarter"),
    ("this year", "this_year"),
    ("this month", "this_month"),
    ("this week", "this_week"),
    ("recent", "recent"),
    ("recently", "recent"),
    ("latest", "recent"),
)

NAMED_PERIODS = frozenset(p for _, p in _PERIOD_PHRASES)

_STOPWORDS = frozenset(
    """
    a about after all an and any are as at be been before but by can could did do
    does for from had has have how i in into is it its me my of on or our over
    say said than that the their them there these they this those to up us was
    we were what when where which who whom why will with would you your tell
    """.split()
)

_WORD_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9&'.-]*")


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def detect_query_type(question: str) -> QueryType:
    for query_type, terms in _QUERY_TYPE_TERMS:
        if any(contains_term(question, t) for t in terms):
            return query_type
    return QueryType.GENERAL


def detect_period(question: str) -> str | None:
    for phrase, period in _PERIOD_PHRASES:
        if contains_term(question, phrase):
            return period
    return None


def resolve_period(period: str, now: datetime) -> TimeWindow | None:
    """Turn a named period into a concrete window ending at ``now``."""
    if period == "recent":
        start = now - timedelta(days=RECENT_DAYS)
    elif period == "this_week":
        start = now - timedelta(days=7)
    elif period == "this_month":
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    elif period == "this_quarter":
        first_month = 3 * ((now.month - 1) // 3) + 1
        start = now.replace(month=first_month, day=1, hour=0, minute=0, second=0, microsecond=0)
    elif period == "this_year":
        start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    else:
        return None
    return TimeWindow(start=start, end=now, period=period)


def extract_keywords(question: str, limit: int = 8) -> list[str]:
    keywords: list[str] = []
    for word in _WORD_RE.findall(question):
        token = word.strip(".'").lower()
        if len(token) < 3 or token in _STOPWORDS or token in keywords:
            continue
        keywords.append(token)
        if len(keywords) >= limit:
            break
    return keywords


def heuristic_analysis(
    question: str,
    roster: Roster,
    now: datetime | None = None,
) -> QueryAnalysis:
    """Analyze a question using keyword matching only."""
    now = now or utc_now()
    companies = roster.match(question)
    keywords = extract_keywords(question)
    period = detect_period(question)
    return QueryAnalysis(
        query_type=detect_query_type(question),
        company_names=tuple(companies),
        keywords=tuple(keywords),
        time_window=resolve_period(period, now) if period else None,
        search_terms=tuple(dict.fromkeys([*companies, *keywords])),
    )


class HeuristicQueryAnalyzer:
    """Query analyzer that never calls the language model.

    Useful for cheap or offline configurations; analysis always succeeds.

    Args:
        roster: Tracked organizations used for alias matching.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(self, roster: Roster, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._roster = roster
        self._clock = clock

    async def analyze(self, question: str) -> tuple[QueryAnalysis, Usage]:
        return (heuristic_analysis(question, self._roster, self._clock()), Usage())
