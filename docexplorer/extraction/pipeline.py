"""Digital-first text extraction with an optical recognition fallback."""

from docexplorer.config.settings import Settings
from docexplorer.extraction.exceptions import ExtractionError
from docexplorer.extraction.models import ExtractionMethod, ExtractionResult
from docexplorer.extraction.text import clean_text, count_words
from docexplorer.logging.logger import Log
from docexplorer.ocr.base import BaseOcrEngine
from docexplorer.ocr.exceptions import OcrError
from docexplorer.ocr.factory import OcrEngineFactory
from docexplorer.ocr.rasterizer import PdfRasterizer
from docexplorer.pdf.base import BasePdfExtractor
from docexplorer.pdf.exceptions import PdfExtractionError
from docexplorer.pdf.factory import PdfExtractorFactory
from docexplorer.retrieval.validation import PDF_MAGIC


class TextExtractionPipeline:
    """Recovers readable text from digitally-authored and scanned PDFs.

    Step 1 reads the embedded text layer; if it holds more than
    ``word_threshold`` words the result is returned as ``digital`` and no page
    is rasterized. Step 2 rasterizes and recognizes up to ``max_ocr_pages``
    pages. Step 3 keeps a non-trivial digital pass next to the optical text
    as ``merged``. Anything shorter than ``min_text_chars`` is a failure.
    """

    def __init__(
        self,
        *,
        pdf_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
        rasterizer: PdfRasterizer,
        word_threshold: int = 50,
        min_text_chars: int = 100,
        max_ocr_pages: int = 25,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._ocr_engine = ocr_engine
        self._rasterizer = rasterizer
        self._word_threshold = word_threshold
        self._min_text_chars = min_text_chars
        self._max_ocr_pages = max_ocr_pages

    def extract(self, data: bytes) -> ExtractionResult:
        """Extract text from PDF bytes.

        Raises:
            ExtractionError: if the input is not a PDF or no step yields enough text.
        """
        if not data or not data.startswith(PDF_MAGIC):
            raise ExtractionError("Invalid PDF file")

        warnings: list[str] = []
        digital_text, page_count = self._extract_digital(data, warnings)
        word_count = count_words(digital_text)
        if word_count > self._word_threshold:
            Log.info(
                f"Digital extraction successful: {word_count} words, {len(digital_text)} chars"
            )
            return ExtractionResult(
                text=digital_text,
                method=ExtractionMethod.DIGITAL,
                pages=page_count,
                warnings=warnings,
            )

        Log.info(f"Digital extraction found only {word_count} words, likely scanned document")
        try:
            optical = self._extract_optical(data, page_count, warnings)
        except OcrError as exc:
            if len(digital_text) >= self._min_text_chars:
                Log.warning(f"OCR failed, falling back to limited digital text: {exc}")
                warnings.append(f"OCR failed, using limited digital extraction: {exc}")
                return ExtractionResult(
                    text=digital_text,
                    method=ExtractionMethod.DIGITAL,
                    pages=page_count,
                    warnings=warnings,
                )
            raise ExtractionError(f"Text extraction failed: {exc}") from exc

        if len(digital_text) >= self._min_text_chars:
            Log.info("Merging partial digital text with OCR text")
            return ExtractionResult(
                text=f"--- Digital Text ---\n{digital_text}\n\n--- OCR Text ---\n{optical.text}",
                method=ExtractionMethod.MERGED,
                pages=optical.pages,
                confidence=optical.confidence,
                warnings=optical.warnings,
            )
        return optical

    def _extract_digital(self, data: bytes, warnings: list[str]) -> tuple[str, int]:
        try:
            pdf_text = self._pdf_extractor.extract(data)
        except PdfExtractionError as exc:
            Log.warning(f"Digital extraction failed: {exc}")
            warnings.append(f"Digital extraction failed: {exc}")
            return "", 0
        return clean_text(pdf_text.text), pdf_text.page_count

    def _extract_optical(
        self, data: bytes, page_count: int, warnings: list[str]
    ) -> ExtractionResult:
        Log.info("Attempting OCR extraction")
        blocks: list[str] = []
        confidences: list[float] = []
        for page_number, image in self._rasterizer.iter_pages(data, self._max_ocr_pages):
            try:
                page = self._ocr_engine.recognize(image)
            except OcrError as exc:
                Log.warning(f"OCR error on page {page_number}: {exc}")
                warnings.append(f"OCR failed on page {page_number}")
                continue
            blocks.append(f"--- Page {page_number} ---\n{page.text.strip()}")
            confidences.append(page.confidence)

        text = "\n\n".join(blocks).strip()
        if not confidences or len(text) < self._min_text_chars:
            raise OcrError("OCR produced no meaningful text")

        if page_count > self._max_ocr_pages:
            warnings.append(
                f"Only the first {self._max_ocr_pages} of {page_count} pages were recognized"
            )
        confidence = sum(confidences) / len(confidences)
        Log.info(
            f"OCR extraction complete: {len(confidences)} pages, "
            f"{len(text)} chars, confidence {confidence:.1f}"
        )
        return ExtractionResult(
            text=text,
            method=ExtractionMethod.OPTICAL,
            pages=len(confidences),
            confidence=confidence,
            warnings=warnings,
        )


def build_extraction_pipeline(settings: Settings) -> TextExtractionPipeline:
    """Build a TextExtractionPipeline with the configured adapters."""
    return TextExtractionPipeline(
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr_engine=OcrEngineFactory.create(settings),
        rasterizer=PdfRasterizer(dpi=settings.ocr_dpi),
        word_threshold=settings.digital_word_threshold,
        min_text_chars=settings.min_text_chars,
        max_ocr_pages=settings.ocr_max_pages,
    )
