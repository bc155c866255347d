from dataclasses import dataclass


@dataclass(frozen=True)
class PortalSelectors:
    """Ordered candidate selectors for the portal search and records viewer."""

    name_field: tuple[str, ...] = ("#Name", 'input[name="Name"]', 'input[id*="Name"]')
    search_submit: tuple[str, ...] = (
        'button[type="submit"]',
        'input[type="submit"]',
        ".btn-primary",
    )
    result_rows: str = "table tbody tr"
    facility_link_keyword: str = "documents"
    grid_rows: str = ".grid-canvas > div"
    grid_cells: str = ".slick-cell"


DEFAULT_SELECTORS = PortalSelectors()
