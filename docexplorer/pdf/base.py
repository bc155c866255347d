from abc import ABC, abstractmethod

from docexplorer.pdf.models import PdfText


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Read the embedded text layer of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with the raw text of every page (empty strings for pages
            without a text layer).

        Raises:
            PdfExtractionError: if the document cannot be parsed.
        """
