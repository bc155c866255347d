"""Best-effort parsers for portal markup snapshots.

The browser side only collects raw row snapshots (hrefs, cell texts); every
interpretation of those snapshots happens here so it can be tested without a
browser.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import urljoin

from docexplorer.portal.exceptions import InvalidInputError, InvalidQueryError
from docexplorer.portal.models import DocumentDescriptor, FacilityRecord

MIN_QUERY_LENGTH = 2

DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{4}")
_ID_PATTERN = re.compile(r"/(\d+)")
_PROGRAM_SPLIT = re.compile(r"[,;]")

FACILITY_ROWS_JS = """
rows => rows.map(row => ({
    hrefs: Array.from(row.querySelectorAll('a')).map(a => a.getAttribute('href') || ''),
    cells: Array.from(row.querySelectorAll('td')).map(td => (td.textContent || '').trim()),
}))
"""

GRID_ROWS_JS = """
(rows, cellSelector) => rows.map(row => ({
    text: row.textContent || '',
    cells: Array.from(row.querySelectorAll(cellSelector)).map(c => (c.textContent || '').trim()),
}))
"""

ANCHOR_HREFS_JS = "anchors => anchors.map(a => a.getAttribute('href') || '')"


def validate_query(query: str | None) -> str:
    """Return the trimmed query or raise if it is too short to search with."""
    cleaned = (query or "").strip()
    if len(cleaned) < MIN_QUERY_LENGTH:
        raise InvalidQueryError(
            f"Search query must be at least {MIN_QUERY_LENGTH} characters"
        )
    return cleaned


def resolve_documents_url(facility_id: str | None, url_template: str) -> str:
    """Build the facility detail URL, accepting a full URL in lieu of an id."""
    value = (facility_id or "").strip()
    if not value:
        raise InvalidInputError("Facility ID is required")
    if value.lower().startswith("http"):
        return value
    return url_template.format(facility_id=value)


def parse_facility_rows(
    rows: Sequence[Mapping[str, Any]],
    base_url: str,
    link_keyword: str = "documents",
) -> list[FacilityRecord]:
    """Turn result-table row snapshots into facility records.

    Rows without a link into the facility's documents page are header or
    pager rows and are skipped. Missing cells become blank fields.
    """
    facilities: list[FacilityRecord] = []
    for index, row in enumerate(rows):
        href = _find_link(row.get("hrefs") or [], link_keyword)
        if href is None:
            continue
        cells = [str(cell or "").strip() for cell in row.get("cells") or []]
        id_match = _ID_PATTERN.search(href)
        facilities.append(
            FacilityRecord(
                id=id_match.group(1) if id_match else f"f-{index}",
                name=_cell(cells, 0),
                address=_cell(cells, 1),
                city=_cell(cells, 2),
                county=_cell(cells, 3),
                zip=_cell(cells, 4),
                programs=_split_programs(_cell(cells, 5)),
                link=urljoin(base_url, href),
            )
        )
    return facilities


def find_viewer_link(hrefs: Iterable[str], keyword: str) -> str | None:
    """Return the first href containing the viewer keyword (case-insensitive)."""
    return _find_link(hrefs, keyword)


def parse_grid_rows(
    rows: Sequence[Mapping[str, Any]],
    *,
    viewer_url: str,
    category: str,
) -> list[DocumentDescriptor]:
    """Turn rendered grid rows into descriptors, keeping each row's position."""
    documents: list[DocumentDescriptor] = []
    for index, row in enumerate(rows):
        text = str(row.get("text") or "")
        cells = [str(c).strip() for c in row.get("cells") or [] if str(c or "").strip()]
        date_match = DATE_PATTERN.search(text)
        if not date_match and not cells:
            continue
        description = " | ".join(cells[1:4]) or text.strip()[:100]
        documents.append(
            DocumentDescriptor(
                id=f"slick-{index}",
                type=cells[0] if cells else "Document",
                date=date_match.group(0) if date_match else "Unknown",
                category=category,
                description=description,
                row_index=index,
                viewer_url=viewer_url,
            )
        )
    return documents


def descriptors_from_dates(
    page_text: str,
    *,
    viewer_url: str,
    category: str,
) -> list[DocumentDescriptor]:
    """Degraded enumeration: one speculative descriptor per distinct date in the page."""
    unique_dates = list(dict.fromkeys(DATE_PATTERN.findall(page_text or "")))
    return [
        DocumentDescriptor(
            id=f"date-{index}",
            type="Document",
            date=date,
            category=category,
            description=f"Document from {date}",
            row_index=index,
            viewer_url=viewer_url,
        )
        for index, date in enumerate(unique_dates)
    ]


def _find_link(hrefs: Iterable[str], keyword: str) -> str | None:
    needle = keyword.lower()
    for href in hrefs:
        if href and needle in href.lower():
            return href
    return None


def _cell(cells: list[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def _split_programs(raw: str) -> tuple[str, ...]:
    return tuple(p.strip() for p in _PROGRAM_SPLIT.split(raw) if p.strip())
