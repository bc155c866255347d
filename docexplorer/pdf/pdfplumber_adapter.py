import io

import pdfplumber

from docexplorer.pdf.base import BasePdfExtractor
from docexplorer.pdf.exceptions import PdfExtractionError
from docexplorer.pdf.models import PdfText


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the text layer page by page with pdfplumber.

    Scanned pages have no text layer and come back as empty strings, which
    keeps page numbering aligned with the optical pass.
    """

    def extract(self, pdf_bytes: bytes) -> PdfText:
        if not pdf_bytes:
            raise PdfExtractionError("Document is empty")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return PdfText(pages=[page.extract_text() or "" for page in pdf.pages])
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read the text layer: {exc}") from exc
