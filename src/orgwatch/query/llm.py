"""Model-assisted query analysis with a per-field heuristic fallback."""

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from orgwatch.data import QueryAnalysis, QueryType, TimeWindow, Usage
from orgwatch.errors import AnalysisError, GenerationError
from orgwatch.generation import ANALYSIS_PARAMS, GenerationParams, TextGenerator
from orgwatch.query.heuristic import NAMED_PERIODS, heuristic_analysis, resolve_period, utc_now
from orgwatch.roster import Roster

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """\
You are a query analyzer for a news system that tracks these organizations: \
{organizations}.

Analyze the user's question and extract:
1. Query type: one of financial, contracts, general, comparison, news
2. Organization names mentioned, using ONLY names from the list above
3. Key search terms and keywords
4. Time window if mentioned

Respond in this exact JSON format:
{{
  "query_type": "financial|contracts|general|comparison|news",
  "company_names": ["Organization 1"],
  "keywords": ["keyword1", "keyword2"],
  "time_window": "recent|this_week|this_month|this_quarter|this_year|null",
  "search_terms": ["term1", "term2"]
}}

Return ONLY the JSON object, no other text.\
"""


def _strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = [line for line in cleaned.split("\n") if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _parse_json_object(raw: str) -> dict[str, Any] | None:
    """Parse the model output as a JSON object, or return None."""
    cleaned = _strip_code_fences(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose; try the outermost braces.
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _string_list(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    items = [str(v).strip() for v in value if isinstance(v, str | int | float) and str(v).strip()]
    return items


def _parse_instant(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_time_window(value: object, now: datetime) -> TimeWindow | None:
    if isinstance(value, str):
        period = value.strip().lower().replace(" ", "_")
        if period in NAMED_PERIODS:
            return resolve_period(period, now)
        return None
    if isinstance(value, dict):
        start = _parse_instant(value.get("start"))
        end = _parse_instant(value.get("end"))
        if start is None and end is None:
            return None
        if start is not None and end is not None and start > end:
            return None
        return TimeWindow(start=start, end=end)
    return None


class LLMQueryAnalyzer:
    """Analyze questions with one low-temperature model call.

    The model output is treated as untrusted structured text: each field is
    validated on its own, and anything missing or malformed is replaced by
    the keyword heuristic for that field. Organization names are restricted
    to the roster. Only a failed model call is fatal.

    Args:
        generator: Generative language service.
        roster: Tracked organizations.
        params: Sampling parameters for the analysis call.
        system_prompt: Custom prompt template; must contain ``{organizations}``.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(
        self,
        generator: TextGenerator,
        roster: Roster,
        *,
        params: GenerationParams = ANALYSIS_PARAMS,
        system_prompt: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._generator = generator
        self._roster = roster
        self._params = params
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._clock = clock

    async def analyze(self, question: str) -> tuple[QueryAnalysis, Usage]:
        try:
            raw, usage = await self._generator.generate(
                system=self._system_prompt.format(organizations=", ".join(self._roster.names)),
                prompt=question,
                max_tokens=self._params.max_tokens,
                temperature=self._params.temperature,
            )
        except GenerationError as e:
            raise AnalysisError("failed to analyze query") from e

        return (self._build_analysis(raw, question), usage)

    def _build_analysis(self, raw: str, question: str) -> QueryAnalysis:
        now = self._clock()
        fallback = heuristic_analysis(question, self._roster, now)
        data = _parse_json_object(raw)
        if data is None:
            logger.warning("Malformed analysis output, using heuristics: %r", raw[:200])
            return fallback

        # Keyword rules decide the type whenever they fire; the model only
        # refines questions the keywords leave general.
        query_type = fallback.query_type
        if query_type is QueryType.GENERAL:
            try:
                query_type = QueryType(str(data.get("query_type", "")).strip().lower())
            except ValueError:
                query_type = QueryType.GENERAL

        companies: list[str] = []
        raw_companies = _string_list(data.get("company_names"))
        for name in raw_companies or []:
            canonical = self._roster.canonicalize(name)
            if canonical is None:
                logger.debug("Dropping unknown organization from analysis: %s", name)
            elif canonical not in companies:
                companies.append(canonical)
        for name in fallback.company_names:
            if name not in companies:
                companies.append(name)

        keywords = _string_list(data.get("keywords"))
        search_terms = _string_list(data.get("search_terms"))
        time_window = _parse_time_window(data.get("time_window"), now) or fallback.time_window

        return QueryAnalysis(
            query_type=query_type,
            company_names=tuple(companies),
            keywords=tuple(keywords) if keywords else fallback.keywords,
            time_window=time_window,
            search_terms=tuple(search_terms) if search_terms else fallback.search_terms,
        )
