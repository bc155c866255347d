import asyncio
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from playwright.async_api import BrowserContext, Page, Response
from playwright.async_api import Error as PlaywrightError

from docexplorer.logging.logger import Log
from docexplorer.retrieval.validation import is_valid_document


class NetworkCapture:
    """Watches every response in a browser context for a PDF payload.

    The listener is attached to the context rather than a page so responses of
    a viewer tab that has not been opened yet are observed too.
    """

    SKIPPED_RESOURCE_TYPES = frozenset({"image", "stylesheet", "font", "script", "media"})

    def __init__(self, context: BrowserContext, min_bytes: int) -> None:
        self._context = context
        self._min_bytes = min_bytes
        self._found: asyncio.Future[bytes] | None = None
        self._inspections: set[asyncio.Task[None]] = set()
        self.source_url: str = ""

    def start(self) -> None:
        self._found = asyncio.get_running_loop().create_future()
        self._context.on("response", self._on_response)

    def stop(self) -> None:
        self._context.remove_listener("response", self._on_response)
        for task in self._inspections:
            task.cancel()
        self._inspections.clear()
        if self._found is not None and not self._found.done():
            self._found.cancel()

    @property
    def captured(self) -> bytes | None:
        if self._found is None or not self._found.done() or self._found.cancelled():
            return None
        return self._found.result()

    async def wait(self, timeout: float) -> bytes | None:
        """Wait up to ``timeout`` seconds for a captured PDF; ``None`` if none arrives."""
        if self._found is None:
            raise RuntimeError("NetworkCapture.start() must be called before wait()")
        if self._found.done():
            return self.captured
        try:
            return await asyncio.wait_for(asyncio.shield(self._found), timeout)
        except asyncio.TimeoutError:
            return None

    def _on_response(self, response: Response) -> None:
        if self._found is None or self._found.done():
            return
        if response.request.resource_type in self.SKIPPED_RESOURCE_TYPES or not response.ok:
            return
        # Range requests return one slice of the file, never the whole document.
        if response.status == 206 or "content-range" in response.headers:
            return
        task = asyncio.ensure_future(self._inspect(response))
        self._inspections.add(task)
        task.add_done_callback(self._inspections.discard)

    async def _inspect(self, response: Response) -> None:
        try:
            body = await response.body()
        except PlaywrightError as exc:
            Log.debug(f"Response body unavailable for {response.url}: {exc}")
            return
        if self._found is None or self._found.done():
            return
        if is_valid_document(body, self._min_bytes):
            Log.info(f"Captured PDF response {response.url} ({len(body)} bytes)")
            self.source_url = response.url
            self._found.set_result(body)


async def first_completed(
    waiters: Sequence[Awaitable[bytes | None]],
    timeout: float,
) -> bytes | None:
    """Return the first non-empty result among concurrent waiters.

    Waiters that fail or return nothing are ignored while the others keep
    running; every waiter still pending at the shared deadline is cancelled.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    pending: set[asyncio.Future[bytes | None]] = {asyncio.ensure_future(w) for w in waiters}
    try:
        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                if task.cancelled():
                    continue
                exc = task.exception()
                if exc is not None:
                    Log.debug(f"Download waiter failed: {exc}")
                    continue
                result = task.result()
                if result:
                    return result
        return None
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def wait_for_download(page: Page, timeout: float) -> bytes | None:
    """Wait for a browser-level download on ``page`` and return its bytes."""
    download = await page.wait_for_event("download", timeout=timeout * 1000)
    Log.info(f"Download started: {download.suggested_filename}")
    path = await download.path()
    if path is None:
        return None
    return Path(path).read_bytes()


async def race_download(
    page: Page,
    capture: NetworkCapture,
    trigger: Callable[[], Awaitable[None]],
    timeout: float,
) -> bytes | None:
    """Fire ``trigger`` and race a captured network PDF against a download event."""
    waiters = [capture.wait(timeout), wait_for_download(page, timeout)]
    tasks = [asyncio.ensure_future(w) for w in waiters]
    # Let both waiters register their listeners before the click.
    await asyncio.sleep(0)
    try:
        await trigger()
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return await first_completed(tasks, timeout)
