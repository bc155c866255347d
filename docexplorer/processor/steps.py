import asyncio

from docexplorer.extraction.exceptions import ExtractionError
from docexplorer.extraction.pipeline import TextExtractionPipeline
from docexplorer.logging.logger import Log
from docexplorer.processor.exceptions import DocumentSkipped
from docexplorer.processor.pipeline import DocumentContext, PipelineStep
from docexplorer.retrieval.retriever import DocumentRetriever
from docexplorer.summarization.base import BaseSummarizer
from docexplorer.summarization.models import DocumentMetadata


class RetrieveStep(PipelineStep):
    def __init__(self, retriever: DocumentRetriever) -> None:
        self._retriever = retriever

    async def run(self, context: DocumentContext) -> DocumentContext:
        retrieved = await self._retriever.retrieve(context.descriptor)
        if retrieved is None:
            raise DocumentSkipped(f"Could not download: {context.descriptor.label}")
        context.retrieved = retrieved
        Log.info(
            f"Retrieved {len(retrieved.content)} bytes for {context.descriptor.label} "
            f"via {retrieved.strategy}"
        )
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, extraction_pipeline: TextExtractionPipeline) -> None:
        self._extraction_pipeline = extraction_pipeline

    async def run(self, context: DocumentContext) -> DocumentContext:
        if context.retrieved is None:
            raise ValueError("DocumentContext.retrieved must be set before extraction")
        try:
            context.extraction = await asyncio.to_thread(
                self._extraction_pipeline.extract, context.retrieved.content
            )
        except ExtractionError as exc:
            raise DocumentSkipped(
                f"No text extracted: {context.descriptor.label}: {exc}"
            ) from exc
        Log.info(
            f"Extracted {len(context.extraction.text)} chars from {context.descriptor.label} "
            f"({context.extraction.method.value})"
        )
        return context


class SummarizeStep(PipelineStep):
    def __init__(self, summarizer: BaseSummarizer) -> None:
        self._summarizer = summarizer

    async def run(self, context: DocumentContext) -> DocumentContext:
        if context.extraction is None:
            raise ValueError("DocumentContext.extraction must be set before summarization")
        context.summary = await asyncio.to_thread(
            self._summarizer.summarize,
            context.extraction.text,
            DocumentMetadata.from_descriptor(context.descriptor),
        )
        return context
