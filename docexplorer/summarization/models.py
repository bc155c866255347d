from dataclasses import dataclass, field
from enum import Enum

from docexplorer.portal.models import DocumentDescriptor


class RelevanceFlag(str, Enum):
    RELEVANT = "Relevant"
    MAYBE = "Maybe"
    NOT_RELEVANT = "Not Relevant"


@dataclass(frozen=True)
class DocumentMetadata:
    """Declared identity of a document, passed to the summarizer with its text."""

    document_id: str = "Unknown Document"
    date: str = "Date Unknown"
    type: str = "Type Unknown"

    @classmethod
    def from_descriptor(cls, descriptor: DocumentDescriptor) -> "DocumentMetadata":
        return cls(
            document_id=descriptor.id or cls.document_id,
            date=descriptor.date or cls.date,
            type=descriptor.type or cls.type,
        )


@dataclass
class DocumentSummary:
    """Structured summary of one document; ``error`` is set for placeholder summaries."""

    document_id: str
    date: str
    type: str
    site_context: str
    contaminants_of_concern: list[str] = field(default_factory=list)
    impacted_media: list[str] = field(default_factory=list)
    key_actions: str = ""
    relevance_flag: RelevanceFlag = RelevanceFlag.MAYBE
    full_summary: str = ""
    error: str | None = None


@dataclass(frozen=True)
class FacilityFindings:
    """Aggregate of the relevant summaries, used to write the facility overview."""

    documents_reviewed: int
    relevant_documents: int
    date_range: str
    contaminants: list[str]
    media: list[str]
    site_contexts: list[str]
