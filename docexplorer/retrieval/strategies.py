from urllib.parse import urljoin

from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docexplorer.browser.locators import first_match
from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.retrieval.base import RetrievalContext, RetrievalStrategy
from docexplorer.retrieval.capture import race_download
from docexplorer.retrieval.selectors import pick_menu_item

EMBEDDED_SOURCE_JS = """
() => {
    const looksLikeDocument = src => src && (
        src.includes('.pdf') || src.includes('GetDocument') || src.includes('Viewer')
    );
    for (const frame of document.querySelectorAll('iframe')) {
        if (looksLikeDocument(frame.src)) return frame.src;
    }
    for (const obj of document.querySelectorAll('object')) {
        if (obj.data) return obj.data;
    }
    for (const embed of document.querySelectorAll('embed')) {
        if (embed.src) return embed.src;
    }
    for (const link of document.querySelectorAll('a')) {
        const href = link.getAttribute('href') || '';
        const text = (link.textContent || '').toLowerCase();
        if (href.includes('.pdf') || href.includes('GetDocument') || href.includes('Download')
            || text.includes('download') || text.includes('pdf')) {
            return href;
        }
    }
    return null;
}
"""


class NetworkCaptureStrategy(RetrievalStrategy):
    """Accept the first PDF the viewer itself pulls over the network."""

    name = "network-capture"

    def __init__(self, capture_timeout_seconds: float, load_settle_ms: int) -> None:
        super().__init__(capture_timeout_seconds + load_settle_ms / 1000 + 1)
        self._capture_timeout = capture_timeout_seconds
        self._load_settle_ms = load_settle_ms

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        try:
            await context.viewer.wait_for_load_state("networkidle", timeout=self._load_settle_ms)
        except PlaywrightTimeoutError:
            Log.debug("Viewer did not reach network idle; checking capture anyway")
        return await context.capture.wait(self._capture_timeout)


class EmbeddedSourceStrategy(RetrievalStrategy):
    """Fetch the source of an embedded frame/object or a download-looking link."""

    name = "embedded-source"

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        source = await context.viewer.evaluate(EMBEDDED_SOURCE_JS)
        if not source:
            return None
        url = urljoin(context.viewer.url, source)
        Log.info(f"Fetching embedded document source: {url}")
        response = await context.viewer.request.get(url, timeout=self.timeout_seconds * 1000)
        return await response.body()


class ToolbarDownloadStrategy(RetrievalStrategy):
    """Click the viewer's download control and race capture against a download."""

    name = "toolbar"

    def __init__(self, timeout_seconds: float, race_timeout_seconds: float) -> None:
        super().__init__(timeout_seconds)
        self._race_timeout = race_timeout_seconds

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        control = await first_match(
            context.viewer, context.selectors.download_controls, visible_only=True
        )
        if control is None:
            Log.info("No download control found in viewer toolbar")
            return None
        data = await race_download(
            context.viewer, context.capture, control.click, self._race_timeout
        )
        if data is None:
            context.menu_open = await _menu_items(context) is not None
            if context.menu_open:
                Log.info("Download control opened a menu")
        return data


class MenuDownloadStrategy(RetrievalStrategy):
    """Pick the best PDF/download entry from the viewer's download menu."""

    name = "menu"

    def __init__(self, timeout_seconds: float, race_timeout_seconds: float) -> None:
        super().__init__(timeout_seconds)
        self._race_timeout = race_timeout_seconds

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        if not context.menu_open:
            control = await first_match(
                context.viewer, context.selectors.download_controls, visible_only=True
            )
            if control is None:
                return None
            await control.click()
            await context.viewer.wait_for_timeout(500)

        items = await _menu_items(context)
        if items is None:
            Log.info("No download menu entries found")
            return None
        texts = await items.all_inner_texts()
        index = pick_menu_item(texts, context.selectors.menu_keywords)
        if index is None:
            Log.info(f"No menu entry looks like a download: {texts}")
            return None
        Log.info(f"Choosing menu entry {texts[index]!r}")
        return await race_download(
            context.viewer, context.capture, items.nth(index).click, self._race_timeout
        )


class PrintToPdfStrategy(RetrievalStrategy):
    """Render the open viewer to PDF; only works in headless Chromium."""

    name = "print"

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        return await context.viewer.pdf(print_background=True)


async def _menu_items(context: RetrievalContext) -> Locator | None:
    for selector in context.selectors.menu_items:
        locator = context.viewer.locator(selector)
        if await locator.count() > 0:
            return locator
    return None


def build_default_strategies(settings: Settings) -> list[RetrievalStrategy]:
    """The cascade in the order it is attempted."""
    return [
        NetworkCaptureStrategy(settings.capture_timeout_seconds, settings.viewer_load_settle_ms),
        EmbeddedSourceStrategy(settings.embedded_source_timeout_seconds),
        ToolbarDownloadStrategy(
            settings.toolbar_timeout_seconds, settings.download_race_timeout_seconds
        ),
        MenuDownloadStrategy(settings.menu_timeout_seconds, settings.download_race_timeout_seconds),
        PrintToPdfStrategy(settings.print_timeout_seconds),
    ]
