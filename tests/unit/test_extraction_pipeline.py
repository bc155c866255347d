from unittest.mock import MagicMock

import pytest
from PIL import Image

from docexplorer.extraction.exceptions import ExtractionError
from docexplorer.extraction.models import ExtractionMethod
from docexplorer.extraction.pipeline import TextExtractionPipeline
from docexplorer.ocr.base import OcrPage
from docexplorer.ocr.exceptions import OcrError
from docexplorer.ocr.rasterizer import PdfRasterizer
from docexplorer.pdf.exceptions import PdfExtractionError
from docexplorer.pdf.models import PdfText
from docexplorer.pdf.pdfplumber_adapter import PdfPlumberAdapter

PDF_STUB = b"%PDF-1.4 stub"
OCR_TEXT = "Monitoring well MW-3 showed benzene above the groundwater objective. " * 3


def _pipeline(
    *,
    digital: str | Exception = "",
    pages: int = 1,
    ocr: list[OcrPage | Exception] | None = None,
    pdf_extractor: object | None = None,
    max_ocr_pages: int = 25,
) -> tuple[TextExtractionPipeline, MagicMock, MagicMock]:
    extractor = MagicMock()
    if isinstance(digital, Exception):
        extractor.extract.side_effect = digital
    else:
        extractor.extract.return_value = PdfText(pages=[digital] + [""] * (pages - 1))
    ocr_engine = MagicMock()
    ocr_engine.recognize.side_effect = ocr or []
    rasterizer = MagicMock()
    page_count = len(ocr or [])
    rasterizer.iter_pages.return_value = [
        (n, Image.new("RGB", (10, 10))) for n in range(1, page_count + 1)
    ]
    pipeline = TextExtractionPipeline(
        pdf_extractor=pdf_extractor or extractor,  # type: ignore[arg-type]
        ocr_engine=ocr_engine,
        rasterizer=rasterizer,
        max_ocr_pages=max_ocr_pages,
    )
    return pipeline, ocr_engine, rasterizer


class TestTextExtractionPipeline:
    def test_rejects_non_pdf(self) -> None:
        pipeline, _, _ = _pipeline()
        with pytest.raises(ExtractionError, match="Invalid PDF file"):
            pipeline.extract(b"<html>not a pdf</html>")

    def test_rejects_empty_input(self) -> None:
        pipeline, _, _ = _pipeline()
        with pytest.raises(ExtractionError):
            pipeline.extract(b"")

    def test_digital_text_never_invokes_ocr(self, report_pdf_bytes: bytes) -> None:
        pipeline, ocr_engine, rasterizer = _pipeline(pdf_extractor=PdfPlumberAdapter())
        result = pipeline.extract(report_pdf_bytes)
        assert result.method is ExtractionMethod.DIGITAL
        assert "underground storage tank" in result.text
        assert result.pages == 1
        assert result.confidence is None
        ocr_engine.recognize.assert_not_called()
        rasterizer.iter_pages.assert_not_called()

    def test_scanned_document_uses_ocr(self) -> None:
        pipeline, ocr_engine, _ = _pipeline(
            digital="",
            pages=2,
            ocr=[OcrPage(text=OCR_TEXT, confidence=80.0), OcrPage(text=OCR_TEXT, confidence=90.0)],
        )
        result = pipeline.extract(PDF_STUB)
        assert result.method is ExtractionMethod.OPTICAL
        assert result.text.startswith("--- Page 1 ---")
        assert "--- Page 2 ---" in result.text
        assert result.pages == 2
        assert result.confidence == pytest.approx(85.0)
        assert ocr_engine.recognize.call_count == 2

    def test_partial_digital_text_is_merged(self) -> None:
        digital = "ab cd ef gh ij kl mn op qr st uv wx yz " * 4
        pipeline, _, _ = _pipeline(
            digital=digital, ocr=[OcrPage(text=OCR_TEXT, confidence=70.0)]
        )
        result = pipeline.extract(PDF_STUB)
        assert result.method is ExtractionMethod.MERGED
        assert result.text.startswith("--- Digital Text ---\n")
        assert "\n\n--- OCR Text ---\n--- Page 1 ---" in result.text
        assert result.confidence == pytest.approx(70.0)

    def test_failed_pages_are_skipped_with_warning(self) -> None:
        pipeline, _, _ = _pipeline(
            ocr=[OcrError("bad page"), OcrPage(text=OCR_TEXT, confidence=60.0)]
        )
        result = pipeline.extract(PDF_STUB)
        assert result.method is ExtractionMethod.OPTICAL
        assert "--- Page 1 ---" not in result.text
        assert "--- Page 2 ---" in result.text
        assert "OCR failed on page 1" in result.warnings

    def test_ocr_failure_with_substantial_digital_text_falls_back(self) -> None:
        digital = "ab " * 60
        pipeline, _, _ = _pipeline(digital=digital, ocr=[OcrError("tesseract missing")])
        result = pipeline.extract(PDF_STUB)
        assert result.method is ExtractionMethod.DIGITAL
        assert result.text == digital.strip()
        assert any("OCR failed" in warning for warning in result.warnings)

    def test_nothing_extractable_raises(self) -> None:
        pipeline, _, _ = _pipeline(digital="", ocr=[OcrPage(text="  ", confidence=10.0)])
        with pytest.raises(ExtractionError, match="no meaningful text"):
            pipeline.extract(PDF_STUB)

    def test_short_ocr_text_is_a_failure(self) -> None:
        pipeline, _, _ = _pipeline(digital="", ocr=[OcrPage(text="Lorem", confidence=95.0)])
        with pytest.raises(ExtractionError):
            pipeline.extract(PDF_STUB)

    def test_digital_engine_failure_still_tries_ocr(self) -> None:
        pipeline, _, _ = _pipeline(
            digital=PdfExtractionError("broken xref"),
            ocr=[OcrPage(text=OCR_TEXT, confidence=75.0)],
        )
        result = pipeline.extract(PDF_STUB)
        assert result.method is ExtractionMethod.OPTICAL
        assert any("Digital extraction failed" in warning for warning in result.warnings)

    def test_page_cap_is_reported(self) -> None:
        pipeline, _, rasterizer = _pipeline(
            digital="", pages=30, ocr=[OcrPage(text=OCR_TEXT, confidence=50.0)], max_ocr_pages=1
        )
        result = pipeline.extract(PDF_STUB)
        rasterizer.iter_pages.assert_called_once_with(PDF_STUB, 1)
        assert "Only the first 1 of 30 pages were recognized" in result.warnings


class TestScannedUpload:
    def test_blank_scan_goes_through_ocr(self, empty_pdf_bytes: bytes) -> None:
        ocr_engine = MagicMock()
        ocr_engine.recognize.return_value = OcrPage(text=OCR_TEXT, confidence=88.0)
        pipeline = TextExtractionPipeline(
            pdf_extractor=PdfPlumberAdapter(),
            ocr_engine=ocr_engine,
            rasterizer=PdfRasterizer(dpi=50),
        )
        result = pipeline.extract(empty_pdf_bytes)
        assert result.method is ExtractionMethod.OPTICAL
        assert result.confidence == pytest.approx(88.0)
        ocr_engine.recognize.assert_called_once()
