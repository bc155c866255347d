from collections.abc import Iterator

import pymupdf
from PIL import Image

from docexplorer.logging.logger import Log
from docexplorer.ocr.exceptions import OcrError


class PdfRasterizer:
    """Renders PDF pages to RGB images with PyMuPDF.

    Higher ``dpi`` improves recognition at a proportional cost in time and
    memory; pages are rendered one at a time.
    """

    def __init__(self, dpi: int = 200) -> None:
        self._dpi = dpi

    def iter_pages(self, pdf_bytes: bytes, max_pages: int) -> Iterator[tuple[int, Image.Image]]:
        """Yield ``(page_number, image)`` for the first ``max_pages`` pages.

        Pages that fail to render are skipped so the rest can still be recognized.
        """
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise OcrError(
                f"PDF conversion failed - document may be encrypted or corrupted: {exc}"
            ) from exc
        with doc:
            for index, page in enumerate(doc):
                if index >= max_pages:
                    break
                try:
                    pixmap = page.get_pixmap(dpi=self._dpi)
                except Exception as exc:
                    Log.warning(f"Rendering page {index + 1} failed, skipping it: {exc}")
                    continue
                yield index + 1, Image.frombytes(
                    "RGB", (pixmap.width, pixmap.height), pixmap.samples
                )
