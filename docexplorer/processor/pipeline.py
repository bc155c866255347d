from abc import ABC, abstractmethod
from dataclasses import dataclass

from docexplorer.extraction.models import ExtractionResult
from docexplorer.portal.models import DocumentDescriptor, RetrievedDocument
from docexplorer.summarization.models import DocumentSummary


@dataclass(slots=True)
class DocumentContext:
    descriptor: DocumentDescriptor
    retrieved: RetrievedDocument | None = None
    extraction: ExtractionResult | None = None
    summary: DocumentSummary | None = None


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: DocumentContext) -> DocumentContext:
        raise NotImplementedError
