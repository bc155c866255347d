from unittest.mock import MagicMock

import pytest

from docexplorer.extraction.models import ExtractionMethod
from docexplorer.extraction.pipeline import TextExtractionPipeline
from docexplorer.ocr.base import OcrPage
from docexplorer.ocr.rasterizer import PdfRasterizer
from docexplorer.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docexplorer.portal.exceptions import InvalidInputError
from docexplorer.processor.upload import UploadProcessor
from docexplorer.summarization.example_client_adapter import ExampleClientAdapter
from docexplorer.summarization.models import DocumentMetadata
from docexplorer.summarization.summarizer import Summarizer

OCR_TEXT = "Groundwater sampling results exceeded Class I standards for benzene. " * 3


def _processor(ocr_engine: MagicMock | None = None) -> UploadProcessor:
    pipeline = TextExtractionPipeline(
        pdf_extractor=PdfPlumberAdapter(),
        ocr_engine=ocr_engine or MagicMock(),
        rasterizer=PdfRasterizer(dpi=50),
    )
    summarizer = Summarizer(client=ExampleClientAdapter(), model="example")
    return UploadProcessor(pipeline, summarizer)


class TestUploadProcessor:
    @pytest.mark.asyncio
    async def test_digital_upload(self, report_pdf_bytes: bytes) -> None:
        result = await _processor().process(
            report_pdf_bytes,
            "report.pdf",
            DocumentMetadata(document_id="IEPA-1", date="3/14/2001", type="Report"),
        )
        assert result.filename == "report.pdf"
        assert result.extraction.method is ExtractionMethod.DIGITAL
        assert result.summary.document_id == "IEPA-1"
        assert result.summary.error is None

    @pytest.mark.asyncio
    async def test_scanned_upload_reports_optical_confidence(self, empty_pdf_bytes: bytes) -> None:
        ocr_engine = MagicMock()
        ocr_engine.recognize.return_value = OcrPage(text=OCR_TEXT, confidence=82.5)
        result = await _processor(ocr_engine).process(empty_pdf_bytes, "scan.pdf")
        assert result.extraction.method is ExtractionMethod.OPTICAL
        assert result.extraction.confidence == pytest.approx(82.5)
        assert result.summary.document_id == "scan.pdf"

    @pytest.mark.asyncio
    async def test_empty_upload_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="No file provided"):
            await _processor().process(b"", "empty.pdf")

    @pytest.mark.asyncio
    async def test_non_pdf_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="Invalid PDF file"):
            await _processor().process(b"PK\x03\x04 zip archive", "archive.zip")
