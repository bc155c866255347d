from docexplorer.browser.locators import first_match
from docexplorer.browser.session import SessionManager
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.portal.exceptions import PortalLayoutError
from docexplorer.portal.models import FacilityRecord
from docexplorer.portal.parsing import FACILITY_ROWS_JS, parse_facility_rows, validate_query
from docexplorer.portal.selectors import DEFAULT_SELECTORS, PortalSelectors


class FacilityLocator:
    """Searches the portal's attribute form and parses the result table."""

    def __init__(
        self,
        sessions: SessionManager,
        settings: Settings,
        selectors: PortalSelectors = DEFAULT_SELECTORS,
    ) -> None:
        self._sessions = sessions
        self._settings = settings
        self._selectors = selectors

    async def search(self, query: str) -> list[FacilityRecord]:
        """Return every facility the portal lists for ``query``.

        Raises:
            InvalidQueryError: if the query is shorter than two characters.
            PortalLayoutError: if the search form cannot be filled in or submitted.
        """
        cleaned = validate_query(query)
        session = await self._sessions.acquire()
        page = session.page
        Log.info(f"Searching facilities: {cleaned!r}")

        await page.goto(
            self._settings.portal_search_url,
            wait_until="networkidle",
            timeout=self._settings.navigation_timeout_ms,
        )
        await page.wait_for_timeout(self._settings.search_settle_ms)

        name_field = await first_match(page, self._selectors.name_field)
        if name_field is None:
            raise PortalLayoutError("Search name field not found")
        await name_field.fill(cleaned)

        submit = await first_match(page, self._selectors.search_submit)
        if submit is None:
            raise PortalLayoutError("Search submit control not found")
        await submit.click()
        await page.wait_for_load_state(
            "networkidle", timeout=self._settings.navigation_timeout_ms
        )
        await page.wait_for_timeout(self._settings.search_settle_ms)

        rows = await page.eval_on_selector_all(self._selectors.result_rows, FACILITY_ROWS_JS)
        facilities = parse_facility_rows(
            rows,
            self._settings.portal_base_url,
            self._selectors.facility_link_keyword,
        )
        Log.info(f"Found {len(facilities)} facilities for {cleaned!r}")
        return facilities
