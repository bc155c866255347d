"""AI-powered environmental document summarizer."""

import json
from datetime import datetime
from typing import Any

from docexplorer.logging.logger import Log
from docexplorer.portal.models import FacilityRecord
from docexplorer.summarization.base import BaseSummarizer
from docexplorer.summarization.client_base import BaseSummarizationClient
from docexplorer.summarization.exceptions import (
    SummarizationError,
    SummarizationValidationError,
)
from docexplorer.summarization.models import (
    DocumentMetadata,
    DocumentSummary,
    FacilityFindings,
    RelevanceFlag,
)
from docexplorer.summarization.prompt_loader import load_prompt_template
from docexplorer.summarization.validator import build_summary, error_summary

TRUNCATION_MARKER = "\n\n[... Text truncated for processing ...]"
_UNKNOWN_DATES = frozenset({"", "Unknown", "Date Unknown"})
_DATE_FORMAT = "%m/%d/%Y"


def truncate_text(text: str, max_chars: int) -> str:
    """Cap ``text`` at ``max_chars`` characters, marking the cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def collect_findings(summaries: list[DocumentSummary]) -> FacilityFindings:
    """Aggregate counts, date range and the findings of relevant summaries."""
    relevant = [s for s in summaries if s.relevance_flag is RelevanceFlag.RELEVANT]
    return FacilityFindings(
        documents_reviewed=len(summaries),
        relevant_documents=len(relevant),
        date_range=_date_range([s.date for s in summaries]),
        contaminants=_unique(item for s in relevant for item in s.contaminants_of_concern),
        media=_unique(item for s in relevant for item in s.impacted_media),
        site_contexts=[s.site_context for s in relevant],
    )


def fallback_overview(facility: FacilityRecord, findings: FacilityFindings) -> str:
    """Templated overview used when the AI provider cannot write one."""
    contaminants = ", ".join(findings.contaminants) or "none specified"
    media = ", ".join(findings.media) or "unspecified media"
    return (
        f"{facility.name} at {facility.address}: Reviewed {findings.documents_reviewed} "
        f"documents spanning {findings.date_range}. {findings.relevant_documents} documents "
        f"contained relevant environmental information. Contaminants identified include "
        f"{contaminants}, affecting {media}."
    )


class Summarizer(BaseSummarizer):
    """Summarizes extracted document text into structured data using an AI provider."""

    SUMMARY_MAX_TOKENS = 2000
    OVERVIEW_MAX_TOKENS = 300
    OVERVIEW_TEMPERATURE = 0.3

    def __init__(
        self,
        *,
        client: BaseSummarizationClient,
        model: str,
        temperature: float = 0.2,
        max_chars: int = 14000,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_chars = max_chars
        self._system_prompt = load_prompt_template("summary_system_prompt.txt")
        self._summary_template = load_prompt_template("summary_prompt.txt")
        self._overview_template = load_prompt_template("overview_prompt.txt")

    def summarize(self, text: str, metadata: DocumentMetadata) -> DocumentSummary:
        """Summarize one document; failures become an error-flagged summary."""
        prompt = self._summary_template.format(
            document_id=metadata.document_id,
            date=metadata.date,
            type=metadata.type,
            text=truncate_text(text, self._max_chars),
        )
        Log.debug(f"Summary prompt for {metadata.document_id}: {len(prompt)} chars")
        try:
            raw_response = self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                max_tokens=self.SUMMARY_MAX_TOKENS,
                json_output=True,
            )
            Log.debug(f"AI raw response:\n{raw_response}")
            summary = build_summary(self._parse_json(raw_response), metadata)
        except SummarizationError as exc:
            Log.error(f"Summarization failed for {metadata.document_id}: {exc}")
            return error_summary(metadata, str(exc))
        except Exception as exc:
            Log.exception(f"Unexpected summarization failure for {metadata.document_id}: {exc}")
            return error_summary(metadata, str(exc) or type(exc).__name__)

        Log.info(
            f"Summary complete for {metadata.document_id}: {summary.relevance_flag.value}"
        )
        return summary

    def overview(self, facility: FacilityRecord, summaries: list[DocumentSummary]) -> str:
        """Write a 3-4 sentence facility overview; falls back to a template on failure."""
        findings = collect_findings(summaries)
        prompt = self._overview_template.format(
            facility_name=facility.name,
            address=facility.address,
            documents_reviewed=findings.documents_reviewed,
            relevant_documents=findings.relevant_documents,
            date_range=findings.date_range,
            contaminants=", ".join(findings.contaminants) or "None specified",
            media=", ".join(findings.media) or "None specified",
            key_findings="\n".join(f"- {context}" for context in findings.site_contexts),
        )
        try:
            text = self._client.create_chat_completion(
                model=self._model,
                temperature=self.OVERVIEW_TEMPERATURE,
                system_prompt="",
                user_prompt=prompt,
                max_tokens=self.OVERVIEW_MAX_TOKENS,
                json_output=False,
            ).strip()
        except SummarizationError as exc:
            Log.error(f"Facility overview generation failed: {exc}")
            return fallback_overview(facility, findings)
        except Exception as exc:
            Log.exception(f"Unexpected facility overview failure: {exc}")
            return fallback_overview(facility, findings)
        return text or fallback_overview(facility, findings)

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SummarizationValidationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise SummarizationValidationError("JSON response must be an object")
        return parsed


def _unique(items: Any) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


def _date_range(dates: list[str]) -> str:
    known = [d for d in dates if d not in _UNKNOWN_DATES]
    if not known:
        return "Unknown period"
    ordered = sorted(known, key=_date_sort_key)
    if len(ordered) == 1:
        return ordered[0]
    return f"{ordered[0]} to {ordered[-1]}"


def _date_sort_key(value: str) -> tuple[int, datetime, str]:
    try:
        return 0, datetime.strptime(value, _DATE_FORMAT), value
    except ValueError:
        return 1, datetime.min, value
