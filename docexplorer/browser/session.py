"""Owner of the single long-lived headless browser session."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from docexplorer.browser.exceptions import SessionError
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log


def is_session_fault(exc: BaseException) -> bool:
    """Return True for automation errors that leave the shared session suspect."""
    return isinstance(exc, (SessionError, PlaywrightError))


@dataclass
class BrowserSession:
    """Live automation handles shared by every portal component."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page

    def is_alive(self) -> bool:
        return self.browser.is_connected() and not self.page.is_closed()


class SessionManager:
    """Lazily starts, shares and tears down one browser session.

    All navigation state lives on ``BrowserSession.page``. Runs must hold
    ``exclusive()`` so that only one logical run drives the page at a time.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._session: BrowserSession | None = None
        self._start_lock = asyncio.Lock()
        self._run_lock = asyncio.Lock()

    @property
    def is_active(self) -> bool:
        return self._session is not None

    async def acquire(self) -> BrowserSession:
        """Return the shared session, starting the browser on first use."""
        async with self._start_lock:
            if self._session is None:
                self._session = await self._start()
            return self._session

    async def reset(self) -> None:
        """Tear down the session so the next ``acquire()`` starts clean."""
        async with self._start_lock:
            session, self._session = self._session, None
        if session is None:
            return
        Log.warning("Resetting browser session")
        try:
            await session.browser.close()
        except PlaywrightError as exc:
            Log.warning(f"Browser close failed during reset: {exc}")
        try:
            await session.playwright.stop()
        except PlaywrightError as exc:
            Log.warning(f"Playwright stop failed during reset: {exc}")

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator["SessionManager"]:
        """Hold the run-level lock for the duration of one logical run."""
        async with self._run_lock:
            yield self

    async def _start(self) -> BrowserSession:
        Log.info("Initializing browser session")
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=self._settings.browser_headless,
                args=["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"],
            )
            context = await browser.new_context(
                user_agent=self._settings.browser_user_agent,
                viewport={"width": 1920, "height": 1080},
                accept_downloads=True,
            )
            context.set_default_navigation_timeout(self._settings.navigation_timeout_ms)
            page = await context.new_page()
        except PlaywrightError as exc:
            await playwright.stop()
            raise SessionError(f"Browser session failed to start: {exc}") from exc
        return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)
