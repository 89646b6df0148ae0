"""Final answer generation from selected evidence."""

import logging

from orgwatch.data import (
    EvidenceItem,
    EvidenceOrigin,
    ResponseStrategy,
    Usage,
    clamp_unit,
)
from orgwatch.errors import GenerationError, SynthesisError
from orgwatch.generation.base import (
    DIRECT_PARAMS,
    SYNTHESIS_PARAMS,
    GenerationParams,
    TextGenerator,
)

logger = logging.getLogger(__name__)

EVIDENCE_SYSTEM_PROMPT = """\
You are an expert analyst covering news about {organizations} and their \
industry. Answer the user's question using ONLY the context provided below.

Guidelines:
- Be factual and cite specific details from the sources (titles, dates, \
figures, contract values).
- If the context does not contain enough information, say so plainly.
- Never invent facts that are not present in the context.
- Keep the answer concise: two or three short paragraphs at most.

{context}\
"""

DIRECT_SYSTEM_PROMPT = """\
You are an expert analyst covering {organizations} and their industry. No \
news articles or search results are available for this question, so answer \
briefly from your own background knowledge. State clearly that the \
information may not be current, and say so if you do not know.\
"""

BASE_CONFIDENCE = 0.5
DIRECT_KNOWLEDGE_CONFIDENCE = 0.7

LOCAL_COUNT_BONUSES = ((5, 0.3), (3, 0.2), (1, 0.1))
WEB_COUNT_BONUSES = ((5, 0.15), (3, 0.1), (1, 0.05))
LOCAL_RELEVANCE_WEIGHT = 0.2
WEB_RELEVANCE_WEIGHT = 0.1


def _count_bonus(count: int, bonuses: tuple[tuple[int, float], ...]) -> float:
    for threshold, bonus in bonuses:
        if count >= threshold:
            return bonus
    return 0.0


def _mean_relevance(items: list[EvidenceItem]) -> float:
    if not items:
        return 0.0
    return sum(item.relevance_score for item in items) / len(items)


def compute_confidence(evidence: list[EvidenceItem], strategy: ResponseStrategy) -> float:
    """Heuristic [0, 1] score of how well an answer is supported.

    Refusals score 0 and direct-knowledge answers a fixed 0.7. Otherwise the
    score starts at 0.5 and grows with the amount and relevance of local and
    web evidence, local evidence weighing more.
    """
    if strategy == ResponseStrategy.REFUSED:
        return 0.0
    if strategy == ResponseStrategy.DIRECT_KNOWLEDGE:
        return DIRECT_KNOWLEDGE_CONFIDENCE

    local = [e for e in evidence if e.origin == EvidenceOrigin.LOCAL]
    web = [e for e in evidence if e.origin == EvidenceOrigin.WEB]

    confidence = BASE_CONFIDENCE
    confidence += _count_bonus(len(local), LOCAL_COUNT_BONUSES)
    confidence += _count_bonus(len(web), WEB_COUNT_BONUSES)
    confidence += _mean_relevance(local) * LOCAL_RELEVANCE_WEIGHT
    confidence += _mean_relevance(web) * WEB_RELEVANCE_WEIGHT
    return clamp_unit(confidence)


def _format_item(item: EvidenceItem, index: int) -> str:
    lines = [f"--- Source {index} ---"]
    if item.organization:
        lines.append(f"Company: {item.organization}")
    lines.append(f"Title: {item.title}")
    if item.published_at:
        lines.append(f"Date: {item.published_at.date().isoformat()}")
    if item.source:
        lines.append(f"Source: {item.source}")
    if item.summary:
        lines.append(f"Summary: {item.summary}")
    if item.url:
        lines.append(f"URL: {item.url}")
    return "\n".join(lines)


def build_context(evidence: list[EvidenceItem]) -> str:
    """Render evidence as a prompt block, grouped by where it came from."""
    local = [e for e in evidence if e.origin == EvidenceOrigin.LOCAL]
    web = [e for e in evidence if e.origin == EvidenceOrigin.WEB]

    sections: list[str] = []
    index = 1
    for heading, items in (
        ("Context from stored news articles:", local),
        ("Context from web search results:", web),
    ):
        if not items:
            continue
        blocks = [heading]
        for item in items:
            blocks.append(_format_item(item, index))
            index += 1
        sections.append("\n\n".join(blocks))
    return "\n\n".join(sections)


class ResponseSynthesizer:
    """Produce the final answer and its confidence.

    Evidence-backed strategies get a context-only instruction; the
    direct-knowledge strategy gets a shorter instruction that asks the model
    to hedge on currency. Generation failures are fatal for the request.

    Args:
        generator: Language service used for the answer.
        organizations: Canonical names of the tracked organizations.
        params: Sampling parameters for evidence-backed answers.
        direct_params: Sampling parameters for direct-knowledge answers.
    """

    def __init__(
        self,
        generator: TextGenerator,
        organizations: list[str],
        *,
        params: GenerationParams = SYNTHESIS_PARAMS,
        direct_params: GenerationParams = DIRECT_PARAMS,
    ) -> None:
        self._generator = generator
        self._organizations = ", ".join(organizations) or "the tracked organizations"
        self._params = params
        self._direct_params = direct_params

    async def synthesize(
        self,
        question: str,
        evidence: list[EvidenceItem],
        strategy: ResponseStrategy,
    ) -> tuple[str, float, Usage]:
        """Generate an answer for ``question``.

        Returns:
            Tuple of (answer, confidence, usage).

        Raises:
            SynthesisError: If the generation call fails.
            ValueError: If called with the refused strategy.
        """
        if strategy == ResponseStrategy.REFUSED:
            raise ValueError("refused questions are not synthesized")

        if strategy == ResponseStrategy.DIRECT_KNOWLEDGE:
            system = DIRECT_SYSTEM_PROMPT.format(organizations=self._organizations)
            params = self._direct_params
        else:
            system = EVIDENCE_SYSTEM_PROMPT.format(
                organizations=self._organizations,
                context=build_context(evidence),
            )
            params = self._params

        try:
            answer, usage = await self._generator.generate(
                system=system,
                prompt=question,
                max_tokens=params.max_tokens,
                temperature=params.temperature,
            )
        except GenerationError as e:
            raise SynthesisError("failed to generate answer") from e

        confidence = compute_confidence(evidence, strategy)
        logger.info(
            "Synthesized %s answer from %d evidence items (confidence %.2f)",
            strategy,
            len(evidence),
            confidence,
        )
        return (answer.strip(), confidence, usage)
