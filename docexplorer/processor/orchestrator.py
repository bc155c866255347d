"""End-to-end run for one facility: locate, enumerate, then process each document."""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator

from docexplorer.browser.session import SessionManager, is_session_fault
from docexplorer.config.settings import Settings
from docexplorer.extraction.pipeline import TextExtractionPipeline
from docexplorer.logging.logger import Log
from docexplorer.portal.enumerator import DocumentEnumerator
from docexplorer.portal.exceptions import InvalidInputError
from docexplorer.portal.locator import FacilityLocator
from docexplorer.portal.models import DocumentDescriptor, FacilityRecord
from docexplorer.portal.parsing import validate_query
from docexplorer.processor.exceptions import DocumentSkipped
from docexplorer.processor.models import (
    NO_DOCUMENTS_OVERVIEW,
    ProcessingResult,
    ProgressEvent,
    Stage,
)
from docexplorer.processor.pipeline import DocumentContext, PipelineStep
from docexplorer.processor.steps import ExtractTextStep, RetrieveStep, SummarizeStep
from docexplorer.retrieval.retriever import DocumentRetriever
from docexplorer.summarization.base import BaseSummarizer

SELECTED_FACILITY_NAME = "Selected Facility"


class ProcessingOrchestrator:
    """Drives one run and reports it as a stream of progress events.

    Documents are processed strictly one after another in enumeration order
    because every step shares the session's single page. A run holds the
    session's run lock from the first event to the terminal one.
    """

    def __init__(
        self,
        *,
        sessions: SessionManager,
        locator: FacilityLocator,
        enumerator: DocumentEnumerator,
        steps: list[PipelineStep],
        summarizer: BaseSummarizer,
    ) -> None:
        self._sessions = sessions
        self._locator = locator
        self._enumerator = enumerator
        self._steps = steps
        self._summarizer = summarizer

    def run(
        self,
        query: str | None = None,
        facility_id: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncGenerator[ProgressEvent, None]:
        """Start a run and return its progress events; the last one is ``done`` or ``failed``.

        Inputs are checked before any event is produced. A caller-supplied
        ``facility_id`` takes precedence over ``query``.

        Raises:
            InvalidInputError: if neither input is given.
            InvalidQueryError: if the query is too short.
        """
        facility_id = (facility_id or "").strip()
        if not facility_id:
            if not (query or "").strip():
                raise InvalidInputError("Provide either a search query or facility ID")
            query = validate_query(query or "")
        return self._guarded_run(query, facility_id, cancel_event or asyncio.Event())

    async def _guarded_run(
        self,
        query: str | None,
        facility_id: str,
        cancel_event: asyncio.Event,
    ) -> AsyncGenerator[ProgressEvent, None]:
        async with self._sessions.exclusive():
            try:
                async for event in self._run(query, facility_id, cancel_event):
                    yield event
            except Exception as exc:
                if is_session_fault(exc):
                    await self._sessions.reset()
                Log.exception(f"Processing run failed: {exc}")
                yield ProgressEvent(stage=Stage.FAILED, progress=100, message=str(exc))

    async def _run(
        self,
        query: str | None,
        facility_id: str,
        cancel_event: asyncio.Event,
    ) -> AsyncIterator[ProgressEvent]:
        if facility_id:
            facility = FacilityRecord(id=facility_id, name=SELECTED_FACILITY_NAME)
            yield ProgressEvent(
                stage=Stage.LOCATING, progress=100, message="Using provided facility ID"
            )
        else:
            yield ProgressEvent(
                stage=Stage.LOCATING, progress=0, message=f'Searching for "{query}"...'
            )
            facilities = await self._locator.search(query or "")
            if not facilities:
                yield ProgressEvent(
                    stage=Stage.FAILED, progress=100, message="No facilities found"
                )
                return
            facility = facilities[0]
            yield ProgressEvent(
                stage=Stage.LOCATING,
                progress=100,
                message=f"Found: {facility.name}",
                facilities=facilities,
            )

        yield ProgressEvent(
            stage=Stage.ENUMERATING, progress=0, message="Loading document list..."
        )
        descriptors = await self._enumerator.list_documents(facility.id)
        yield ProgressEvent(
            stage=Stage.ENUMERATING,
            progress=100,
            message=f"Found {len(descriptors)} documents",
            count=len(descriptors),
        )

        result = ProcessingResult(
            facility=facility,
            overview=NO_DOCUMENTS_OVERVIEW,
            documents_found=len(descriptors),
            documents_processed=0,
        )
        if not descriptors:
            yield ProgressEvent(
                stage=Stage.DONE, progress=100, message=NO_DOCUMENTS_OVERVIEW, result=result
            )
            return

        total = len(descriptors)
        for index, descriptor in enumerate(descriptors, start=1):
            if cancel_event.is_set():
                Log.warning(f"Run cancelled before document {index}/{total}")
                return
            progress = round(index / total * 100)
            yield ProgressEvent(
                stage=Stage.RETRIEVING,
                progress=progress,
                message=f"Processing {index}/{total}: {descriptor.label}",
                current=index,
                total=total,
            )
            context = await self._process_document(descriptor, result)
            if context is None or context.summary is None:
                continue
            result.summaries.append(context.summary)
            yield ProgressEvent(
                stage=Stage.SUMMARIZING,
                progress=progress,
                message=f"Completed: {descriptor.type} - {context.summary.relevance_flag.value}",
                current=index,
                total=total,
                latest_summary=context.summary,
            )

        if cancel_event.is_set():
            Log.warning("Run cancelled before facility overview")
            return
        result.documents_processed = len(result.summaries)
        yield ProgressEvent(
            stage=Stage.SUMMARIZING, progress=100, message="Generating facility overview..."
        )
        result.overview = await asyncio.to_thread(
            self._summarizer.overview, facility, result.summaries
        )
        yield ProgressEvent(
            stage=Stage.DONE,
            progress=100,
            message=(
                f"Processed {result.documents_processed} of {result.documents_found} documents"
            ),
            result=result,
        )

    async def _process_document(
        self, descriptor: DocumentDescriptor, result: ProcessingResult
    ) -> DocumentContext | None:
        context = DocumentContext(descriptor=descriptor)
        try:
            for step in self._steps:
                context = await step.run(context)
        except DocumentSkipped as exc:
            Log.warning(str(exc))
            result.errors.append(str(exc))
            return None
        except Exception as exc:
            if is_session_fault(exc):
                raise
            Log.exception(f"Unexpected error processing {descriptor.label}")
            result.errors.append(f"Error processing {descriptor.label}: {exc}")
            return None
        return context


def build_orchestrator(
    settings: Settings,
    sessions: SessionManager,
    *,
    extraction_pipeline: TextExtractionPipeline,
    summarizer: BaseSummarizer,
) -> ProcessingOrchestrator:
    """Build a ProcessingOrchestrator sharing one session manager."""
    retriever = DocumentRetriever(sessions, settings)
    return ProcessingOrchestrator(
        sessions=sessions,
        locator=FacilityLocator(sessions, settings),
        enumerator=DocumentEnumerator(sessions, settings),
        steps=[
            RetrieveStep(retriever),
            ExtractTextStep(extraction_pipeline),
            SummarizeStep(summarizer),
        ],
        summarizer=summarizer,
    )
