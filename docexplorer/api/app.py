"""FastAPI application exposing search, enumeration, batch processing and upload."""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from docexplorer.api.schemas import (
    GetDocumentsRequest,
    ProcessAllRequest,
    SearchFacilityRequest,
    SummarizeUrlRequest,
)
from docexplorer.browser.session import SessionManager
from docexplorer.config.settings import Settings
from docexplorer.extraction.exceptions import ExtractionError
from docexplorer.extraction.pipeline import build_extraction_pipeline
from docexplorer.logging.logger import Log
from docexplorer.portal.enumerator import DocumentEnumerator
from docexplorer.portal.exceptions import InvalidInputError, InvalidQueryError
from docexplorer.portal.locator import FacilityLocator
from docexplorer.processor.download import PdfDownloader, build_downloader, url_filename
from docexplorer.processor.exceptions import DownloadError
from docexplorer.processor.models import ProgressEvent, to_jsonable
from docexplorer.processor.orchestrator import ProcessingOrchestrator, build_orchestrator
from docexplorer.processor.upload import UploadProcessor
from docexplorer.summarization.factory import SummarizerFactory
from docexplorer.summarization.models import DocumentMetadata


@dataclass(frozen=True)
class AppDependencies:
    sessions: SessionManager
    locator: FacilityLocator
    enumerator: DocumentEnumerator
    orchestrator: ProcessingOrchestrator
    upload_processor: UploadProcessor
    downloader: PdfDownloader


def build_dependencies(settings: Settings) -> AppDependencies:
    """Wire every component around one shared browser session manager."""
    sessions = SessionManager(settings)
    extraction_pipeline = build_extraction_pipeline(settings)
    summarizer = SummarizerFactory.create(settings)
    return AppDependencies(
        sessions=sessions,
        locator=FacilityLocator(sessions, settings),
        enumerator=DocumentEnumerator(sessions, settings),
        orchestrator=build_orchestrator(
            settings,
            sessions,
            extraction_pipeline=extraction_pipeline,
            summarizer=summarizer,
        ),
        upload_processor=UploadProcessor(extraction_pipeline, summarizer),
        downloader=build_downloader(settings),
    )


def format_event(event: ProgressEvent) -> str:
    """Encode one progress event as a server-sent-events frame."""
    return f"data: {json.dumps(event.to_dict())}\n\n"


def create_app(
    *,
    settings: Settings | None = None,
    dependencies: AppDependencies | None = None,
) -> FastAPI:
    settings = settings or Settings()
    deps = dependencies or build_dependencies(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await deps.sessions.reset()

    app = FastAPI(title="Document Explorer API", version="0.1.0", lifespan=lifespan)
    app.state.dependencies = deps

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/search-facility")
    async def search_facility(body: SearchFacilityRequest) -> JSONResponse:
        try:
            async with deps.sessions.exclusive():
                facilities = await deps.locator.search(body.query)
        except InvalidQueryError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except Exception as exc:
            Log.exception(f"Search failed: {exc}")
            await deps.sessions.reset()
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Search failed", str(exc))
        return JSONResponse(
            {
                "success": True,
                "query": body.query.strip(),
                "count": len(facilities),
                "facilities": [to_jsonable(facility) for facility in facilities],
            }
        )

    @app.post("/api/get-documents")
    async def get_documents(body: GetDocumentsRequest) -> JSONResponse:
        try:
            async with deps.sessions.exclusive():
                documents = await deps.enumerator.list_documents(body.facility_id)
        except InvalidInputError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except Exception as exc:
            Log.exception(f"Document enumeration failed: {exc}")
            await deps.sessions.reset()
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get documents", str(exc)
            )
        return JSONResponse(
            {
                "success": True,
                "facility_id": body.facility_id,
                "count": len(documents),
                "documents": [to_jsonable(document) for document in documents],
            }
        )

    @app.post("/api/process-all")
    async def process_all(body: ProcessAllRequest, request: Request) -> Response:
        cancel_event = asyncio.Event()
        try:
            events = deps.orchestrator.run(
                query=body.query,
                facility_id=body.facility_id,
                cancel_event=cancel_event,
            )
        except (InvalidInputError, InvalidQueryError) as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))

        async def stream() -> AsyncIterator[str]:
            # Closing the run releases the session lock.
            async with aclosing(events):
                async for event in events:
                    if await request.is_disconnected():
                        Log.warning("Client disconnected; cancelling run")
                        cancel_event.set()
                        break
                    yield format_event(event)

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.post("/api/summarize-pdf")
    async def summarize_pdf(request: Request) -> JSONResponse:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            form = await request.form()
            upload = form.get("file")
            url = form.get("url")
            fields = {key: form.get(key) for key in ("document_id", "date", "type")}
        elif content_type.startswith("application/json"):
            try:
                body = SummarizeUrlRequest.model_validate(await request.json())
            except ValueError as exc:
                return _error(status.HTTP_400_BAD_REQUEST, "Invalid JSON body", str(exc))
            if not body.url.strip():
                return _error(status.HTTP_400_BAD_REQUEST, "No URL in request body")
            upload, url = None, body.url
            fields = {"document_id": body.document_id, "date": body.date, "type": body.type}
        else:
            return _error(status.HTTP_400_BAD_REQUEST, "Unsupported content type")

        if isinstance(upload, StarletteUploadFile):
            data = await upload.read()
            filename = upload.filename or "upload.pdf"
        elif isinstance(url, str) and url.strip():
            try:
                data = await deps.downloader.fetch(url)
            except DownloadError as exc:
                return _error(status.HTTP_400_BAD_REQUEST, str(exc), hint=exc.hint)
            filename = url_filename(url)
        else:
            return _error(status.HTTP_400_BAD_REQUEST, "No file or URL provided")

        metadata = DocumentMetadata(
            document_id=_text(fields["document_id"]) or filename,
            date=_text(fields["date"]) or DocumentMetadata.date,
            type=_text(fields["type"]) or DocumentMetadata.type,
        )
        try:
            result = await deps.upload_processor.process(data, filename, metadata)
        except InvalidInputError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except ExtractionError as exc:
            return _error(
                status.HTTP_422_UNPROCESSABLE_ENTITY, "Text extraction failed", str(exc)
            )
        extraction = to_jsonable(result.extraction)
        extraction["text_length"] = len(result.extraction.text)
        return JSONResponse(
            {
                "success": True,
                "filename": result.filename,
                "extraction": extraction,
                "summary": to_jsonable(result.summary),
            }
        )

    return app


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _error(
    status_code: int, error: str, message: str | None = None, hint: str | None = None
) -> JSONResponse:
    content: dict[str, object] = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    if hint is not None:
        content["hint"] = hint
    return JSONResponse(status_code=status_code, content=content)
