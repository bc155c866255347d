"""Retrieval state machine: select a grid row, open the viewer, run the cascade."""

import asyncio
import re

from playwright.async_api import Locator, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docexplorer.browser.exceptions import SessionError
from docexplorer.browser.session import BrowserSession, SessionManager
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.portal.models import DocumentDescriptor, RetrievedDocument
from docexplorer.portal.selectors import DEFAULT_SELECTORS, PortalSelectors
from docexplorer.retrieval.base import RetrievalContext, RetrievalStrategy
from docexplorer.retrieval.capture import NetworkCapture
from docexplorer.retrieval.selectors import DEFAULT_VIEWER_SELECTORS, ViewerSelectors
from docexplorer.retrieval.strategies import build_default_strategies
from docexplorer.retrieval.validation import is_valid_document

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def document_filename(descriptor: DocumentDescriptor) -> str:
    """Build a filesystem-safe name such as ``doc_3-14-2001.pdf``."""
    stem = _UNSAFE_FILENAME_CHARS.sub("-", descriptor.date.replace("/", "-")).strip("-")
    return f"doc_{stem or descriptor.id}.pdf"


class DocumentRetriever:
    """Obtains PDF bytes for one descriptor through an ordered strategy cascade.

    The first strategy producing a valid PDF wins. Exhausting the cascade is a
    soft failure (``None``); only a dead browser session raises.
    """

    def __init__(
        self,
        sessions: SessionManager,
        settings: Settings,
        strategies: list[RetrievalStrategy] | None = None,
        portal_selectors: PortalSelectors = DEFAULT_SELECTORS,
        viewer_selectors: ViewerSelectors = DEFAULT_VIEWER_SELECTORS,
    ) -> None:
        self._sessions = sessions
        self._settings = settings
        self._strategies = strategies if strategies is not None else build_default_strategies(settings)
        self._portal_selectors = portal_selectors
        self._viewer_selectors = viewer_selectors

    @property
    def strategies(self) -> list[RetrievalStrategy]:
        return list(self._strategies)

    async def retrieve(self, descriptor: DocumentDescriptor) -> RetrievedDocument | None:
        """Return the document for ``descriptor`` or ``None`` if no strategy succeeds.

        Raises:
            SessionError: if the browser session died during the attempt.
        """
        session = await self._sessions.acquire()
        Log.info(f"Retrieving document {descriptor.row_index}: {descriptor.label}")

        pages_before = list(session.context.pages)
        capture = NetworkCapture(session.context, self._settings.min_document_bytes)
        capture.start()
        viewer: Page | None = None
        try:
            viewer = await self._open_viewer(session, descriptor)
            if viewer is None:
                return None
            context = RetrievalContext(
                session=session,
                viewer=viewer,
                descriptor=descriptor,
                capture=capture,
                selectors=self._viewer_selectors,
            )
            return await self._run_cascade(context)
        finally:
            capture.stop()
            await self._close_viewer(session, viewer, pages_before)

    async def _run_cascade(self, context: RetrievalContext) -> RetrievedDocument | None:
        descriptor = context.descriptor
        for strategy in self._strategies:
            Log.info(f"Trying strategy '{strategy.name}' for {descriptor.label}")
            try:
                data = await asyncio.wait_for(
                    strategy.attempt(context), timeout=strategy.timeout_seconds
                )
            except asyncio.TimeoutError:
                Log.warning(f"Strategy '{strategy.name}' timed out after {strategy.timeout_seconds}s")
                continue
            except PlaywrightError as exc:
                self._raise_if_session_dead(context.session, exc)
                Log.warning(f"Strategy '{strategy.name}' failed: {exc}")
                continue

            if data is None:
                continue
            if not is_valid_document(data, self._settings.min_document_bytes):
                Log.warning(
                    f"Strategy '{strategy.name}' produced {len(data)} bytes that are not a PDF; "
                    "discarding"
                )
                continue

            Log.info(f"Strategy '{strategy.name}' retrieved {len(data)} bytes")
            return RetrievedDocument(
                descriptor=descriptor,
                content=data,
                strategy=strategy.name,
                filename=document_filename(descriptor),
            )

        Log.warning(f"All retrieval strategies failed for {descriptor.label}")
        return None

    async def _open_viewer(
        self, session: BrowserSession, descriptor: DocumentDescriptor
    ) -> Page | None:
        page = session.page
        try:
            if (
                descriptor.viewer_url
                and self._settings.viewer_link_keyword not in page.url.lower()
            ):
                Log.info("Returning to records viewer")
                await page.goto(
                    descriptor.viewer_url,
                    wait_until="networkidle",
                    timeout=self._settings.navigation_timeout_ms,
                )
                await page.wait_for_timeout(self._settings.viewer_settle_ms)

            rows = page.locator(self._portal_selectors.grid_rows)
            row_count = await rows.count()
            if descriptor.row_index >= row_count:
                Log.warning(f"Row {descriptor.row_index} out of range ({row_count} rows)")
                return None

            row = rows.nth(descriptor.row_index)
            await row.click()
            await page.wait_for_timeout(self._settings.row_select_settle_ms)
            return await self._double_click_for_viewer(session, row)
        except PlaywrightError as exc:
            self._raise_if_session_dead(session, exc)
            Log.warning(f"Could not open viewer for {descriptor.label}: {exc}")
            return None

    async def _double_click_for_viewer(self, session: BrowserSession, row: Locator) -> Page:
        try:
            async with session.context.expect_page(
                timeout=self._settings.viewer_open_timeout_ms
            ) as page_info:
                await row.dblclick()
            viewer = await page_info.value
        except PlaywrightTimeoutError:
            Log.info("Viewer opened inline in the session page")
            return session.page

        Log.info(f"Viewer opened in new tab: {viewer.url}")
        try:
            await viewer.wait_for_load_state(
                "domcontentloaded", timeout=self._settings.viewer_load_settle_ms
            )
        except PlaywrightTimeoutError:
            Log.debug("Viewer tab still loading; continuing")
        return viewer

    async def _close_viewer(
        self,
        session: BrowserSession,
        viewer: Page | None,
        pages_before: list[Page],
    ) -> None:
        try:
            for page in list(session.context.pages):
                if page is session.page or page in pages_before or page.is_closed():
                    continue
                await page.close()
            if viewer is session.page:
                await session.page.keyboard.press("Escape")
                await session.page.wait_for_timeout(1000)
        except PlaywrightError as exc:
            Log.warning(f"Viewer cleanup failed: {exc}")

    @staticmethod
    def _raise_if_session_dead(session: BrowserSession, exc: PlaywrightError) -> None:
        if not session.is_alive():
            raise SessionError(f"Browser session lost during retrieval: {exc}") from exc
