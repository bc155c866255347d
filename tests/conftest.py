import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docexplorer.config.settings import Settings

_REPORT_LINES = [
    "Leaking underground storage tank incident report for the former service station.",
    "Two gasoline tanks were removed from the northern pump island during excavation.",
    "Soil samples collected beneath the tanks exceeded Tier 1 remediation objectives.",
    "Benzene, toluene, ethylbenzene and xylenes were detected in monitoring wells.",
    "Groundwater flow direction was interpreted toward the southeast of the property.",
    "Corrective action included excavation and off-site disposal of impacted soil.",
    "Quarterly groundwater monitoring will continue until closure is requested.",
]


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page), like a scan without a text layer."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def report_pdf_bytes() -> bytes:
    """Generate a digitally-authored report with well over fifty words."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 720
    for line in _REPORT_LINES:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        summarization_provider="example",
        search_settle_ms=0,
        viewer_settle_ms=0,
        row_select_settle_ms=0,
    )
