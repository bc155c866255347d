from dataclasses import dataclass


@dataclass(frozen=True)
class ViewerSelectors:
    """Ordered candidate selectors for the document viewer's download affordances."""

    download_controls: tuple[str, ...] = (
        '[title*="ownload" i]',
        '[aria-label*="ownload" i]',
        'button:has-text("Download")',
        'a:has-text("Download")',
        '[class*="download" i]',
    )
    menu_items: tuple[str, ...] = (
        '[role="menuitem"]',
        '[role="option"]',
        ".dropdown-menu li",
        ".menu-item",
        'ul[class*="menu" i] li',
    )
    # Higher weight wins; an unannotated PDF is preferred over any other export.
    menu_keywords: tuple[tuple[str, int], ...] = (
        ("without annotations", 4),
        ("pdf", 2),
        ("download", 1),
    )


DEFAULT_VIEWER_SELECTORS = ViewerSelectors()


def score_menu_item(text: str, keywords: tuple[tuple[str, int], ...]) -> int:
    lowered = text.lower()
    return sum(weight for keyword, weight in keywords if keyword in lowered)


def pick_menu_item(texts: list[str], keywords: tuple[tuple[str, int], ...]) -> int | None:
    """Return the index of the best-scoring menu entry, or None if nothing matches."""
    best_index: int | None = None
    best_score = 0
    for index, text in enumerate(texts):
        score = score_menu_item(text, keywords)
        if score > best_score:
            best_index, best_score = index, score
    return best_index
