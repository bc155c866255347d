import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from docexplorer.browser.exceptions import SessionError
from docexplorer.config.settings import Settings
from docexplorer.portal.models import DocumentDescriptor
from docexplorer.retrieval.base import RetrievalContext, RetrievalStrategy
from docexplorer.retrieval.retriever import DocumentRetriever, document_filename
from docexplorer.retrieval.strategies import build_default_strategies

PDF = b"%PDF-1.7\n" + b"0" * 1024
DESCRIPTOR = DocumentDescriptor(
    id="slick-2", type="Incident Report", date="3/14/2001", row_index=2, viewer_url="https://v"
)


class FakeStrategy(RetrievalStrategy):
    def __init__(
        self,
        name: str,
        result: bytes | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
        timeout_seconds: float = 1.0,
    ) -> None:
        super().__init__(timeout_seconds)
        self.name = name
        self._result = result
        self._error = error
        self._delay = delay
        self.calls = 0

    async def attempt(self, context: RetrievalContext) -> bytes | None:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._result


def _sessions(alive: bool = True) -> tuple[MagicMock, MagicMock]:
    session = MagicMock()
    session.is_alive.return_value = alive
    sessions = MagicMock()
    sessions.acquire = AsyncMock(return_value=session)
    return sessions, session


def _retriever(
    strategies: list[RetrievalStrategy], *, alive: bool = True
) -> tuple[DocumentRetriever, MagicMock]:
    sessions, session = _sessions(alive)
    retriever = DocumentRetriever(sessions, Settings(_env_file=None), strategies=strategies)
    return retriever, session


async def _retrieve(
    retriever: DocumentRetriever, viewer: MagicMock | None = None
) -> tuple[object, AsyncMock]:
    close = AsyncMock()
    with (
        patch.object(retriever, "_open_viewer", AsyncMock(return_value=viewer or MagicMock())),
        patch.object(retriever, "_close_viewer", close),
    ):
        result = await retriever.retrieve(DESCRIPTOR)
    return result, close


class TestDocumentRetriever:
    @pytest.mark.asyncio
    async def test_first_valid_strategy_wins(self) -> None:
        first = FakeStrategy("network-capture", result=None)
        second = FakeStrategy("toolbar", result=PDF)
        third = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([first, second, third])
        result, _ = await _retrieve(retriever)
        assert result is not None
        assert result.content == PDF
        assert result.strategy == "toolbar"
        assert result.descriptor == DESCRIPTOR
        assert result.filename == "doc_3-14-2001.pdf"
        assert third.calls == 0

    @pytest.mark.asyncio
    async def test_invalid_buffer_is_discarded(self) -> None:
        html = FakeStrategy("embedded-source", result=b"<html>" + b" " * 900)
        tiny = FakeStrategy("toolbar", result=b"%PDF-1.4")
        good = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([html, tiny, good])
        result, _ = await _retrieve(retriever)
        assert result is not None
        assert result.strategy == "print"

    @pytest.mark.asyncio
    async def test_timed_out_strategy_is_skipped(self) -> None:
        stuck = FakeStrategy("menu", result=PDF, delay=5.0, timeout_seconds=0.05)
        good = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([stuck, good])
        result, _ = await _retrieve(retriever)
        assert result is not None
        assert result.strategy == "print"

    @pytest.mark.asyncio
    async def test_automation_error_on_live_session_is_absorbed(self) -> None:
        broken = FakeStrategy("toolbar", error=PlaywrightError("element detached"))
        good = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([broken, good])
        result, _ = await _retrieve(retriever)
        assert result is not None
        assert result.strategy == "print"

    @pytest.mark.asyncio
    async def test_automation_error_on_dead_session_raises(self) -> None:
        broken = FakeStrategy("toolbar", error=PlaywrightError("Target closed"))
        never = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([broken, never], alive=False)
        with pytest.raises(SessionError):
            await _retrieve(retriever)
        assert never.calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_cascade_returns_none(self) -> None:
        strategies = [FakeStrategy(name) for name in ("network-capture", "toolbar", "print")]
        retriever, _ = _retriever(strategies)
        result, close = await _retrieve(retriever)
        assert result is None
        assert all(s.calls == 1 for s in strategies)
        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_viewer_not_opened_skips_cascade(self) -> None:
        strategy = FakeStrategy("print", result=PDF)
        retriever, _ = _retriever([strategy])
        close = AsyncMock()
        with (
            patch.object(retriever, "_open_viewer", AsyncMock(return_value=None)),
            patch.object(retriever, "_close_viewer", close),
        ):
            result = await retriever.retrieve(DESCRIPTOR)
        assert result is None
        assert strategy.calls == 0
        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_capture_listener_is_detached(self) -> None:
        retriever, session = _retriever([FakeStrategy("print", result=PDF)])
        await _retrieve(retriever)
        session.context.on.assert_called_once()
        session.context.remove_listener.assert_called_once()


class TestDefaultStrategies:
    def test_cascade_order(self) -> None:
        names = [s.name for s in build_default_strategies(Settings(_env_file=None))]
        assert names == ["network-capture", "embedded-source", "toolbar", "menu", "print"]

    def test_every_strategy_is_bounded(self) -> None:
        assert all(s.timeout_seconds > 0 for s in build_default_strategies(Settings(_env_file=None)))


class TestDocumentFilename:
    def test_uses_date(self) -> None:
        assert document_filename(DESCRIPTOR) == "doc_3-14-2001.pdf"

    def test_unknown_date(self) -> None:
        descriptor = DocumentDescriptor(id="slick-0", date="")
        assert document_filename(descriptor) == "doc_slick-0.pdf"
