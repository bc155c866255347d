from abc import ABC, abstractmethod

from docexplorer.portal.models import FacilityRecord
from docexplorer.summarization.models import DocumentMetadata, DocumentSummary


class BaseSummarizer(ABC):
    """Contract for the summarization collaborator."""

    @abstractmethod
    def summarize(self, text: str, metadata: DocumentMetadata) -> DocumentSummary:
        """Summarize extracted document text.

        Args:
            text: Extracted text; implementations cap its length.
            metadata: Declared id, date and type of the document.

        Returns:
            DocumentSummary. Provider or parsing failures produce a summary
            with ``error`` set instead of raising.
        """

    @abstractmethod
    def overview(self, facility: FacilityRecord, summaries: list[DocumentSummary]) -> str:
        """Write a facility-level narrative from the document summaries."""
