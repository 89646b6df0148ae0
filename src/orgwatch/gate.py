"""Confidence gate: choose how a request will source its evidence."""

import logging

from orgwatch.data import EvidenceItem, ResponseStrategy
from orgwatch.scope import ScopeChecker

logger = logging.getLogger(__name__)


class ConfidenceGate:
    """Select one of the escalating response strategies.

    Enough strong local evidence answers locally. Otherwise the question is
    escalated to web search if it is in scope, and refused if not. Low
    confidence alone never refuses; only the scope check does.

    Args:
        scope: Eligibility check shared with the augmenter.
        min_evidence: Local items required for the local strategy.
        min_mean_relevance: Mean local relevance required for the local strategy.
    """

    def __init__(
        self,
        scope: ScopeChecker,
        *,
        min_evidence: int = 3,
        min_mean_relevance: float = 0.6,
    ) -> None:
        self._scope = scope
        self._min_evidence = min_evidence
        self._min_mean_relevance = min_mean_relevance

    def decide(
        self,
        evidence: list[EvidenceItem],
        *,
        question: str,
        organizations: list[str] | tuple[str, ...] = (),
    ) -> ResponseStrategy:
        if len(evidence) >= self._min_evidence:
            mean = sum(e.relevance_score for e in evidence) / len(evidence)
            if mean >= self._min_mean_relevance:
                return ResponseStrategy.LOCAL_EVIDENCE
            logger.info("Local evidence too weak (mean relevance %.2f), escalating", mean)

        if self._scope.is_in_scope(question, organizations):
            return ResponseStrategy.WEB_AUGMENTED
        return ResponseStrategy.REFUSED
