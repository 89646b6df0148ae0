from orgwatch.synthesis.synthesizer import (
    DIRECT_KNOWLEDGE_CONFIDENCE,
    DIRECT_SYSTEM_PROMPT,
    EVIDENCE_SYSTEM_PROMPT,
    ResponseSynthesizer,
    build_context,
    compute_confidence,
)

__all__ = [
    "DIRECT_KNOWLEDGE_CONFIDENCE",
    "DIRECT_SYSTEM_PROMPT",
    "EVIDENCE_SYSTEM_PROMPT",
    "ResponseSynthesizer",
    "build_context",
    "compute_confidence",
]
