"""Fetches a PDF by URL for the upload path."""

from urllib.parse import unquote, urlparse

import httpx

from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.processor.exceptions import DownloadError
from docexplorer.retrieval.validation import PDF_MAGIC

EXPIRED_LINK_HINT = (
    "Viewer links expire quickly. Download the PDF in a browser and upload the file instead."
)
AUTH_HINT = "The URL may have expired or require authentication."


def looks_like_html(data: bytes) -> bool:
    head = data[:100].lower()
    return b"<!doctype" in head or b"<html" in head


def url_filename(url: str) -> str:
    """Last path segment of ``url`` when it names a PDF, else ``download.pdf``."""
    name = unquote(urlparse(url).path.rsplit("/", 1)[-1])
    return name if name.lower().endswith(".pdf") else "download.pdf"


class PdfDownloader:
    """Downloads a document URL and checks that the body is a PDF."""

    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._headers = {"User-Agent": user_agent, "Accept": "application/pdf,*/*"}
        self._timeout = timeout_seconds
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """Return the PDF bytes behind ``url``.

        Raises:
            DownloadError: if the request fails, the server answers with an
                error status, or the body is not a PDF.
        """
        url = url.strip()
        if not url.lower().startswith(("http://", "https://")):
            raise DownloadError(f"Unsupported URL: {url or '(empty)'}")

        Log.info(f"Downloading PDF from {url}")
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                raise DownloadError(f"Download failed: {exc}", hint=EXPIRED_LINK_HINT) from exc

        if response.is_error:
            raise DownloadError(
                f"Download failed: HTTP {response.status_code}", hint=EXPIRED_LINK_HINT
            )
        data = response.content
        if data.startswith(PDF_MAGIC):
            Log.info(f"Downloaded {len(data)} bytes from {url}")
            return data
        if looks_like_html(data):
            raise DownloadError(
                "Received HTML instead of PDF - URL may require authentication or has expired",
                hint=AUTH_HINT,
            )
        content_type = response.headers.get("content-type", "unknown")
        raise DownloadError(
            f"URL did not return a valid PDF (Content-Type: {content_type})", hint=AUTH_HINT
        )


def build_downloader(settings: Settings) -> PdfDownloader:
    return PdfDownloader(
        user_agent=settings.browser_user_agent,
        timeout_seconds=settings.download_timeout_seconds,
    )
