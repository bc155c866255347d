class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentSkipped(ProcessorError):
    """Raised by a per-document step when the document cannot be processed.

    The message is the human-readable error recorded in the run result.
    """


class DownloadError(ProcessorError):
    """Raised when a document URL cannot be turned into PDF bytes."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint
