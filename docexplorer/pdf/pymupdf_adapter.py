import pymupdf

from docexplorer.pdf.base import BasePdfExtractor
from docexplorer.pdf.exceptions import PdfExtractionError
from docexplorer.pdf.models import PdfText


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads the text layer page by page with PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfText:
        if not pdf_bytes:
            raise PdfExtractionError("Document is empty")
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfExtractionError(f"Could not open document with PyMuPDF: {exc}") from exc
        with doc:
            if doc.needs_pass:
                raise PdfExtractionError("Document is password protected")
            try:
                return PdfText(pages=[page.get_text() for page in doc])
            except Exception as exc:
                raise PdfExtractionError(f"PyMuPDF could not read the text layer: {exc}") from exc
