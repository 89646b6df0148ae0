"""Web search fallback when local evidence is insufficient."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from orgwatch.augment.credibility import CREDIBLE_DOMAINS, is_credible_source
from orgwatch.data import EvidenceItem, Usage, WebResult
from orgwatch.errors import OutOfScopeError
from orgwatch.query.heuristic import utc_now
from orgwatch.roster import Roster, contains_term
from orgwatch.scope import ScopeChecker
from orgwatch.search.base import WebSearchProvider

logger = logging.getLogger(__name__)

DEFAULT_QUALIFIER_TERMS: tuple[str, ...] = ("defense", "aerospace")

DEFAULT_DOMAIN_VARIANTS: tuple[str, ...] = (
    "corporation",
    "company",
    "technologies",
    "defense",
    "defence",
    "aerospace",
    "military",
    "pentagon",
    "contract",
    "missile",
    "aircraft",
)

TITLE_MATCH_SCORE = 0.4
SNIPPET_MATCH_SCORE = 0.2
ORGANIZATION_MENTION_SCORE = 0.3
CREDIBLE_SOURCE_SCORE = 0.2
RECENCY_SCORE = 0.1


class ExternalKnowledgeAugmenter:
    """Search the web for evidence about an in-scope question.

    Steps: re-check eligibility, enhance the query with canonical
    organization names and domain qualifiers, query every provider
    concurrently, filter permissively, rank, and keep the top results.
    A failing provider is logged and skipped; if all fail the result is empty.

    Args:
        providers: Search backends; their results are concatenated.
        scope: Eligibility check shared with the confidence gate.
        roster: Tracked organizations for alias expansion.
        top_k: Evidence items returned.
        max_results_per_provider: Results requested from each provider.
        recent_days: Age under which a result earns the recency bonus.
        timeout: Seconds allowed per provider call.
        qualifier_terms: Terms appended to bias the search toward the domain.
        domain_variants: Terms that mark a result as topically relevant.
        credible_domains: Allow-listed outlets earning the credibility bonus.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(
        self,
        providers: list[WebSearchProvider],
        scope: ScopeChecker,
        roster: Roster,
        *,
        top_k: int = 5,
        max_results_per_provider: int = 10,
        recent_days: int = 30,
        timeout: float = 10.0,
        qualifier_terms: tuple[str, ...] = DEFAULT_QUALIFIER_TERMS,
        domain_variants: tuple[str, ...] = DEFAULT_DOMAIN_VARIANTS,
        credible_domains: frozenset[str] = CREDIBLE_DOMAINS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._providers = providers
        self._scope = scope
        self._roster = roster
        self._top_k = top_k
        self._max_results = max_results_per_provider
        self._recent = timedelta(days=recent_days)
        self._timeout = timeout
        self._qualifier_terms = qualifier_terms
        self._domain_variants = tuple(v.lower() for v in domain_variants)
        self._credible_domains = credible_domains
        self._clock = clock

    async def augment(
        self,
        question: str,
        org_hints: list[str] | tuple[str, ...] = (),
    ) -> tuple[list[EvidenceItem], Usage]:
        """Return ranked web evidence for ``question``.

        Raises:
            OutOfScopeError: If the question is not about the tracked
                organizations or their domain.
        """
        if not self._scope.is_in_scope(question, org_hints):
            raise OutOfScopeError("query is not about the tracked organizations")

        organizations = self._organizations(question, org_hints)
        enhanced = self.enhance_query(question, organizations)
        logger.info("Searching the web: %r", enhanced)

        results, usage = await self._search_all(enhanced)
        kept = [r for r in results if self._is_relevant(r, organizations)]
        ranked = self._rank(kept, question, organizations)
        logger.info(
            "Web search found %d results, kept %d, returning %d",
            len(results),
            len(kept),
            len(ranked),
        )
        return (ranked, usage)

    def enhance_query(self, question: str, organizations: list[str]) -> str:
        parts = [question.strip()]
        for name in organizations:
            if name.lower() not in question.lower():
                parts.append(name)
        for term in self._qualifier_terms:
            if not contains_term(question, term):
                parts.append(term)
        return " ".join(parts)

    def _organizations(self, question: str, org_hints: list[str] | tuple[str, ...]) -> list[str]:
        names: list[str] = []
        for hint in org_hints:
            names.append(self._roster.canonicalize(hint) or hint.strip())
        names.extend(self._roster.match(question))
        return list(dict.fromkeys(n for n in names if n))

    async def _search_all(self, query: str) -> tuple[list[WebResult], Usage]:
        tasks = [
            asyncio.wait_for(
                provider.search(query, max_results=self._max_results), timeout=self._timeout
            )
            for provider in self._providers
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[WebResult] = []
        usage = Usage()
        failures = 0
        for provider, outcome in zip(self._providers, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                failures += 1
                logger.warning("Search provider %s failed. Error: %r", provider.name, outcome)
                continue
            provider_results, provider_usage = outcome
            results.extend(provider_results)
            usage += provider_usage

        if self._providers and failures == len(self._providers):
            logger.warning("All %d search providers failed", failures)
        return (results, usage)

    def _variants(self, organization: str) -> tuple[str, ...]:
        org = self._roster.get_by_name(organization)
        return org.variants if org else (organization.lower(),)

    def _is_relevant(self, result: WebResult, organizations: list[str]) -> bool:
        """Drop a result only when its text clearly mentions nothing relevant.

        Results with no title or snippet cannot be judged and are kept; the
        generation step discounts irrelevant material. Names, aliases and
        domain terms match as plain substrings here, favoring recall; scoring
        credits only whole-word organization mentions.
        """
        content = f"{result.title} {result.snippet}".lower().strip()
        if not content:
            return True
        for name in organizations:
            if any(v in content for v in self._variants(name)):
                return True
        for org in self._roster.organizations:
            if any(v in content for v in org.variants):
                return True
        return any(v in content for v in self._domain_variants)

    def score(self, result: WebResult, question: str, organizations: list[str]) -> float:
        """Unclamped relevance score of a web result."""
        query = question.strip().lower()
        title = result.title.lower()
        snippet = result.snippet.lower()
        content = f"{title} {snippet}"

        score = 0.0
        if query and query in title:
            score += TITLE_MATCH_SCORE
        if query and query in snippet:
            score += SNIPPET_MATCH_SCORE
        for name in organizations:
            if any(contains_term(content, v) for v in self._variants(name)):
                score += ORGANIZATION_MENTION_SCORE
        if is_credible_source(result.url, self._credible_domains):
            score += CREDIBLE_SOURCE_SCORE
        if result.published_at is not None and self._clock() - result.published_at < self._recent:
            score += RECENCY_SCORE
        return score

    def _rank(
        self, results: list[WebResult], question: str, organizations: list[str]
    ) -> list[EvidenceItem]:
        scored = [(self.score(r, question, organizations), r) for r in results]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [EvidenceItem.from_web_result(r, s) for s, r in scored[: self._top_k]]
