from orgwatch.pipeline.base import QueryService
from orgwatch.pipeline.orchestrator import REFUSAL_TEMPLATE, QueryPipeline

__all__ = ["QueryPipeline", "QueryService", "REFUSAL_TEMPLATE"]
