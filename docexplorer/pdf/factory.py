from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.pdf.base import BasePdfExtractor
from docexplorer.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docexplorer.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Builds the digital text extractor used before any OCR is attempted."""

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        name = settings.pdf_engine.strip().lower()
        try:
            extractor_cls = cls.ENGINES[name]
        except KeyError:
            raise ValueError(
                f"Unknown PDF engine '{name}'. Choose from: {', '.join(cls.ENGINES)}"
            ) from None
        Log.debug(f"Digital text layer read with {name}")
        return extractor_cls()
