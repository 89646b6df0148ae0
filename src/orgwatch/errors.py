"""Exception types raised by the query pipeline."""


class OrgWatchError(Exception):
    """Base class for all orgwatch errors."""


class InvalidQuestionError(OrgWatchError):
    """The question is empty or too long. Raised before any external call."""


class GenerationError(OrgWatchError):
    """A call to the generative language service failed or returned nothing."""


class ServiceError(OrgWatchError):
    """A fatal failure of an external dependency while handling a request."""


class AnalysisError(ServiceError):
    """Query analysis could not reach the language model."""


class SynthesisError(ServiceError):
    """The final answer could not be generated."""


class SummarizationError(ServiceError):
    """An article summary could not be generated."""


class OutOfScopeError(OrgWatchError):
    """The question is not about the tracked organizations or their domain."""


class ArticleNotFoundError(OrgWatchError):
    """No stored article has the requested identifier."""


GENERIC_FAILURE_MESSAGE = "failed to process query"


def user_message(exc: BaseException) -> str:
    """Map an exception to the message shown to the end user."""
    if isinstance(exc, InvalidQuestionError):
        return f"invalid query: {exc}"
    if isinstance(exc, OutOfScopeError):
        return "question is outside the tracked organizations and their industry"
    if isinstance(exc, ArticleNotFoundError):
        return "article not found"
    if isinstance(exc, SummarizationError):
        return "failed to summarize article"
    return GENERIC_FAILURE_MESSAGE
