from abc import ABC, abstractmethod
from dataclasses import dataclass

from playwright.async_api import Page

from docexplorer.browser.session import BrowserSession
from docexplorer.portal.models import DocumentDescriptor
from docexplorer.retrieval.capture import NetworkCapture
from docexplorer.retrieval.selectors import ViewerSelectors


@dataclass
class RetrievalContext:
    """State shared by the strategies of one cascade run."""

    session: BrowserSession
    viewer: Page
    descriptor: DocumentDescriptor
    capture: NetworkCapture
    selectors: ViewerSelectors
    menu_open: bool = False


class RetrievalStrategy(ABC):
    """One step of the retrieval cascade."""

    name: str = "strategy"

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def attempt(self, context: RetrievalContext) -> bytes | None:
        """Try to obtain the document's bytes from the open viewer.

        Args:
            context: Viewer page, network capture and descriptor for this run.

        Returns:
            Candidate bytes, or None when this strategy found nothing. The
            retriever validates any returned buffer before accepting it.
        """
