from collections.abc import Sequence

from playwright.async_api import Locator, Page
from playwright.async_api import Error as PlaywrightError

from docexplorer.logging.logger import Log


async def first_match(
    page: Page,
    candidates: Sequence[str],
    *,
    visible_only: bool = False,
) -> Locator | None:
    """Return the first element matched by an ordered list of candidate selectors.

    Third-party markup is not versioned, so every lookup is a best-effort walk
    over several selectors. Selector syntax errors and detached frames are
    treated as a miss for that candidate.
    """
    for selector in candidates:
        try:
            locator = page.locator(selector)
            count = await locator.count()
            for index in range(count):
                element = locator.nth(index)
                if not visible_only or await element.is_visible():
                    Log.debug(f"Selector matched: {selector}")
                    return element
        except PlaywrightError as exc:
            Log.debug(f"Selector {selector!r} failed: {exc}")
    return None
