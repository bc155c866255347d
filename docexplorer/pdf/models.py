from dataclasses import dataclass


@dataclass(frozen=True)
class PdfText:
    """Embedded text layer of a PDF, one entry per page."""

    pages: list[str]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def text(self) -> str:
        return "\n".join(self.pages).strip()
