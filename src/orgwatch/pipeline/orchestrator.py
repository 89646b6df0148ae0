"""Query orchestration: analyze, retrieve, gate, augment, synthesize."""

import logging
import time
from types import TracebackType
from typing import Self

from orgwatch.augment import ExternalKnowledgeAugmenter
from orgwatch.cache import ArticleSummarizer, SummaryCache
from orgwatch.data import (
    ArticleSummary,
    EvidenceItem,
    QueryResponse,
    Question,
    ResponseStrategy,
    Usage,
)
from orgwatch.errors import OutOfScopeError
from orgwatch.gate import ConfidenceGate
from orgwatch.query.base import QueryAnalyzer
from orgwatch.retrieval import ContextRetriever
from orgwatch.roster import Roster
from orgwatch.run_logger import RunLogger
from orgwatch.synthesis import ResponseSynthesizer

logger = logging.getLogger(__name__)

REFUSAL_TEMPLATE = (
    "I can only answer questions about {organizations} and their industry. "
    "Please ask about their news, contracts, finances, or leadership."
)


def _by_relevance(items: list[EvidenceItem]) -> list[EvidenceItem]:
    return sorted(items, key=lambda e: e.relevance_score, reverse=True)


class QueryPipeline:
    """Answer questions about the tracked organizations.

    Flow:
    1. Validate the question (no external call is made for invalid input)
    2. Analyze it into a structured intent (failure is fatal)
    3. Retrieve and rank local evidence (failures degrade to no evidence)
    4. Gate: local evidence, web augmentation, or refusal
    5. Augment from the web if needed, falling back to local evidence and
       then to direct model knowledge when search finds nothing
    6. Synthesize the answer (failure is fatal)

    Also fronts the cached article summarizer. Use as an async context
    manager to run the cache sweep for the pipeline's lifetime.

    Args:
        analyzer: Turns questions into a QueryAnalysis.
        retriever: Local evidence retrieval.
        gate: Strategy selection.
        augmenter: Web search fallback (None disables web search).
        synthesizer: Final answer generation.
        summarizer: Cached single-article summaries.
        cache: The summary cache behind ``summarizer``.
        roster: Tracked organizations, for hint canonicalization.
        run_logger: Optional RunLogger for per-query stage records.
    """

    def __init__(
        self,
        analyzer: QueryAnalyzer,
        retriever: ContextRetriever,
        gate: ConfidenceGate,
        augmenter: ExternalKnowledgeAugmenter | None,
        synthesizer: ResponseSynthesizer,
        summarizer: ArticleSummarizer,
        cache: SummaryCache,
        roster: Roster,
        *,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._retriever = retriever
        self._gate = gate
        self._augmenter = augmenter
        self._synthesizer = synthesizer
        self._summarizer = summarizer
        self._cache = cache
        self._roster = roster
        self._run_logger = run_logger
        self._refusal = REFUSAL_TEMPLATE.format(organizations=" and ".join(roster.names))

    async def __aenter__(self) -> Self:
        self._cache.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._cache.stop()

    async def process_query(
        self,
        question: str,
        org_hints: list[str] | None = None,
    ) -> QueryResponse:
        """Answer a question, choosing the evidence strategy per request.

        Raises:
            InvalidQuestionError: If the question is empty or too long.
            AnalysisError: If the analysis call fails.
            SynthesisError: If the answer generation call fails.
        """
        start = time.monotonic()
        query = Question.parse(question, org_hints)
        hints = self._canonical_hints(query.org_hints)
        logger.info("Processing query: %r (hints=%s)", query.text, list(hints))

        run_id = self._run_logger.start_run(query.text, hints) if self._run_logger else None
        total_usage = Usage()
        try:
            response = await self._answer(query.text, hints, total_usage, run_id, start)
        except Exception as e:
            if self._run_logger:
                self._run_logger.finish_run(run_id, usage=total_usage, error=e)
            raise

        if self._run_logger:
            self._run_logger.finish_run(
                run_id,
                strategy=str(response.strategy),
                confidence=response.confidence,
                evidence_count=len(response.evidence),
                usage=total_usage,
            )
        logger.info(
            "Query answered via %s in %.2fs (evidence=%d, confidence=%.2f)",
            response.strategy,
            response.processing_time,
            len(response.evidence),
            response.confidence,
        )
        return response

    async def _answer(
        self,
        question: str,
        hints: tuple[str, ...],
        total_usage: Usage,
        run_id: str | None,
        start: float,
    ) -> QueryResponse:
        # Step 1: analysis
        t0 = time.monotonic()
        analysis, usage = await self._analyzer.analyze(question)
        total_usage += usage
        self._log_stage(run_id, "analysis", self._analyzer, question, analysis, usage, t0)

        organizations = tuple(dict.fromkeys([*analysis.company_names, *hints]))

        # Step 2: local retrieval
        t0 = time.monotonic()
        local = await self._retriever.retrieve(analysis, hints)
        self._log_stage(run_id, "retrieval", self._retriever, analysis, local, None, t0)

        # Step 3: strategy
        t0 = time.monotonic()
        strategy = self._gate.decide(local, question=question, organizations=organizations)
        self._log_stage(
            run_id, "strategy", self._gate, {"evidence_count": len(local)}, strategy, None, t0
        )

        if strategy == ResponseStrategy.REFUSED:
            logger.info("Question is out of scope, refusing")
            return QueryResponse(
                answer=self._refusal,
                evidence=(),
                strategy=strategy,
                confidence=0.0,
                processing_time=time.monotonic() - start,
                companies_referenced=organizations,
                usage=total_usage,
            )

        evidence = local
        if strategy == ResponseStrategy.WEB_AUGMENTED:
            t0 = time.monotonic()
            try:
                web, usage = await self._augment(question, organizations)
            except OutOfScopeError:
                logger.info("Augmenter rejected the question as out of scope, refusing")
                return QueryResponse(
                    answer=self._refusal,
                    evidence=(),
                    strategy=ResponseStrategy.REFUSED,
                    confidence=0.0,
                    processing_time=time.monotonic() - start,
                    companies_referenced=organizations,
                    usage=total_usage,
                )
            total_usage += usage
            self._log_stage(run_id, "augmentation", self._augmenter, question, web, usage, t0)

            if web:
                evidence = _by_relevance([*web, *local])
            else:
                t0 = time.monotonic()
                if local:
                    logger.warning(
                        "Web search found nothing; answering from %d local items "
                        "below the confidence threshold",
                        len(local),
                    )
                    strategy = ResponseStrategy.LOCAL_EVIDENCE
                else:
                    logger.info("No evidence available, answering from model knowledge")
                    strategy = ResponseStrategy.DIRECT_KNOWLEDGE
                    evidence = []
                self._log_stage(
                    run_id,
                    "fallback",
                    self._gate,
                    {"from": ResponseStrategy.WEB_AUGMENTED, "local_items": len(local)},
                    {"strategy": strategy, "gate_threshold_met": False},
                    None,
                    t0,
                )

        # Step 4: synthesis
        t0 = time.monotonic()
        answer, confidence, usage = await self._synthesizer.synthesize(question, evidence, strategy)
        total_usage += usage
        self._log_stage(
            run_id,
            "synthesis",
            self._synthesizer,
            {"strategy": strategy, "evidence_count": len(evidence)},
            {"answer": answer, "confidence": confidence},
            usage,
            t0,
        )

        return QueryResponse(
            answer=answer,
            evidence=tuple(evidence),
            strategy=strategy,
            confidence=confidence,
            processing_time=time.monotonic() - start,
            companies_referenced=organizations,
            usage=total_usage,
        )

    async def _augment(
        self, question: str, organizations: tuple[str, ...]
    ) -> tuple[list[EvidenceItem], Usage]:
        if self._augmenter is None:
            return ([], Usage())
        try:
            return await self._augmenter.augment(question, organizations)
        except OutOfScopeError:
            raise
        except Exception as e:
            logger.warning("Web augmentation failed. Error: %r", e)
            return ([], Usage())

    async def summarize_article(self, article_id: str) -> ArticleSummary:
        """Summarize a stored article, reusing a cached digest when present.

        Raises:
            ArticleNotFoundError: If no article has this id.
            SummarizationError: If the generation call fails.
        """
        return await self._summarizer.summarize(article_id)

    def cache_stats(self) -> dict[str, int]:
        return self._cache.stats()

    def _canonical_hints(self, hints: tuple[str, ...]) -> tuple[str, ...]:
        names = [self._roster.canonicalize(h) or h for h in hints]
        return tuple(dict.fromkeys(names))

    def _log_stage(
        self,
        run_id: str | None,
        stage: str,
        component: object,
        input_data: object,
        output_data: object,
        usage: Usage | None,
        t0: float,
    ) -> None:
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage=stage,
                component=type(component).__name__,
                input_data=input_data,
                output_data=output_data,
                usage=usage,
                duration_seconds=time.monotonic() - t0,
            )
