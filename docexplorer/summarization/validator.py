"""Turns a parsed AI response into a DocumentSummary with safe defaults."""

from typing import Any

from docexplorer.summarization.models import DocumentMetadata, DocumentSummary, RelevanceFlag

DEFAULT_SITE_CONTEXT = "No site context extracted"
DEFAULT_KEY_ACTIONS = "No key actions identified"
DEFAULT_FULL_SUMMARY = "Summary generation failed"

_VALID_RELEVANCE = {flag.value: flag for flag in RelevanceFlag}


def build_summary(data: dict[str, Any], metadata: DocumentMetadata) -> DocumentSummary:
    """Build a DocumentSummary from a raw AI response object.

    Missing or mistyped fields fall back to defaults; identity fields fall
    back to the declared metadata. Never raises for field-level problems.
    """
    return DocumentSummary(
        document_id=_string(data.get("documentId")) or metadata.document_id,
        date=_string(data.get("date")) or metadata.date,
        type=_string(data.get("type")) or metadata.type,
        site_context=_string(data.get("siteContext")) or DEFAULT_SITE_CONTEXT,
        contaminants_of_concern=_string_list(data.get("contaminantsOfConcern")),
        impacted_media=_string_list(data.get("impactedMedia")),
        key_actions=_string(data.get("keyActions")) or DEFAULT_KEY_ACTIONS,
        relevance_flag=_relevance(data.get("relevanceFlag")),
        full_summary=_string(data.get("fullSummary")) or DEFAULT_FULL_SUMMARY,
    )


def error_summary(metadata: DocumentMetadata, message: str) -> DocumentSummary:
    """Placeholder summary for a document the AI provider could not summarize."""
    return DocumentSummary(
        document_id=metadata.document_id,
        date=metadata.date,
        type=metadata.type,
        site_context=f"Error processing document: {message}",
        key_actions="Could not extract due to processing error",
        relevance_flag=RelevanceFlag.MAYBE,
        full_summary=(
            f"Document processing encountered an error: {message}. "
            "The document may need manual review."
        ),
        error=message,
    )


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def _string_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item.strip() for item in raw if isinstance(item, str) and item.strip()]


def _relevance(raw: Any) -> RelevanceFlag:
    if not isinstance(raw, str):
        return RelevanceFlag.MAYBE
    return _VALID_RELEVANCE.get(raw.strip(), RelevanceFlag.MAYBE)
