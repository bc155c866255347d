class SummarizationError(Exception):
    """Raised when summarization fails."""


class SummarizationValidationError(SummarizationError):
    """Raised when the AI response is not a JSON object."""


class SummarizationNetworkError(SummarizationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
