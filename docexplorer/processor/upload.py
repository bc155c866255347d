"""Direct upload path: extraction and summarization without the browser."""

import asyncio
from dataclasses import dataclass

from docexplorer.extraction.models import ExtractionResult
from docexplorer.extraction.pipeline import TextExtractionPipeline
from docexplorer.logging.logger import Log
from docexplorer.portal.exceptions import InvalidInputError
from docexplorer.retrieval.validation import PDF_MAGIC
from docexplorer.summarization.base import BaseSummarizer
from docexplorer.summarization.models import DocumentMetadata, DocumentSummary


@dataclass(frozen=True)
class UploadResult:
    filename: str
    extraction: ExtractionResult
    summary: DocumentSummary


class UploadProcessor:
    """Summarizes a single PDF supplied directly by the caller."""

    def __init__(
        self,
        extraction_pipeline: TextExtractionPipeline,
        summarizer: BaseSummarizer,
    ) -> None:
        self._extraction_pipeline = extraction_pipeline
        self._summarizer = summarizer

    async def process(
        self,
        data: bytes,
        filename: str,
        metadata: DocumentMetadata | None = None,
    ) -> UploadResult:
        """Extract and summarize an uploaded PDF.

        Raises:
            InvalidInputError: if no file content was supplied or it is not a PDF.
            ExtractionError: if no text could be recovered.
        """
        if not data:
            raise InvalidInputError("No file provided")
        if not data.startswith(PDF_MAGIC):
            raise InvalidInputError("Invalid PDF file")
        metadata = metadata or DocumentMetadata(document_id=filename or DocumentMetadata.document_id)

        Log.info(f"Processing upload {filename}: {len(data)} bytes")
        extraction = await asyncio.to_thread(self._extraction_pipeline.extract, data)
        Log.info(
            f"Extracted {len(extraction.text)} chars from {filename} ({extraction.method.value})"
        )
        summary = await asyncio.to_thread(self._summarizer.summarize, extraction.text, metadata)
        return UploadResult(filename=filename, extraction=extraction, summary=summary)
