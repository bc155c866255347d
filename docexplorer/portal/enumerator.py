from urllib.parse import urljoin

from docexplorer.browser.session import SessionManager
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.portal.models import DocumentDescriptor
from docexplorer.portal.parsing import (
    ANCHOR_HREFS_JS,
    GRID_ROWS_JS,
    descriptors_from_dates,
    find_viewer_link,
    parse_grid_rows,
    resolve_documents_url,
)
from docexplorer.portal.selectors import DEFAULT_SELECTORS, PortalSelectors


class DocumentEnumerator:
    """Lists the documents the records viewer shows for one facility.

    Only rows the virtualized grid has rendered are visible in the markup and
    the grid is not scrolled, so very long record sets can be under-reported.
    """

    def __init__(
        self,
        sessions: SessionManager,
        settings: Settings,
        selectors: PortalSelectors = DEFAULT_SELECTORS,
    ) -> None:
        self._sessions = sessions
        self._settings = settings
        self._selectors = selectors

    async def list_documents(self, facility_id: str) -> list[DocumentDescriptor]:
        """Enumerate descriptors for a facility id or a fully-qualified detail URL.

        Raises:
            InvalidInputError: if no identifier is given.
        """
        url = resolve_documents_url(facility_id, self._settings.portal_documents_url)
        session = await self._sessions.acquire()
        page = session.page

        Log.info(f"Loading facility page: {url}")
        await page.goto(
            url, wait_until="networkidle", timeout=self._settings.navigation_timeout_ms
        )
        await page.wait_for_timeout(self._settings.search_settle_ms)

        hrefs = await page.eval_on_selector_all("a", ANCHOR_HREFS_JS)
        viewer_href = find_viewer_link(hrefs, self._settings.viewer_link_keyword)
        if viewer_href is None:
            Log.warning(f"No records viewer link found on {url}")
            return []

        viewer_url = urljoin(page.url, viewer_href)
        Log.info(f"Opening records viewer: {viewer_url}")
        await page.goto(
            viewer_url,
            wait_until="networkidle",
            timeout=self._settings.navigation_timeout_ms,
        )
        # The viewer exposes no ready signal; give its grid time to render.
        await page.wait_for_timeout(self._settings.viewer_settle_ms)

        rows = await page.eval_on_selector_all(
            self._selectors.grid_rows, GRID_ROWS_JS, self._selectors.grid_cells
        )
        category = self._settings.default_document_category
        documents = parse_grid_rows(rows, viewer_url=viewer_url, category=category)
        if not documents:
            Log.warning("No grid rows rendered; falling back to dates in page text")
            page_text = await page.inner_text("body")
            documents = descriptors_from_dates(
                page_text, viewer_url=viewer_url, category=category
            )

        Log.info(f"Found {len(documents)} documents for facility {facility_id}")
        return documents
