from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from docexplorer.portal.models import FacilityRecord
from docexplorer.summarization.models import DocumentSummary, RelevanceFlag

NO_DOCUMENTS_OVERVIEW = "No documents found for this facility."


class Stage(str, Enum):
    LOCATING = "locating"
    ENUMERATING = "enumerating"
    RETRIEVING = "retrieving"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.DONE, Stage.FAILED)


@dataclass
class ProcessingResult:
    """Terminal artifact of one orchestration run."""

    facility: FacilityRecord
    overview: str
    documents_found: int
    documents_processed: int
    summaries: list[DocumentSummary] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def relevant(self) -> list[DocumentSummary]:
        return self._flagged(RelevanceFlag.RELEVANT)

    @property
    def maybe(self) -> list[DocumentSummary]:
        return self._flagged(RelevanceFlag.MAYBE)

    @property
    def not_relevant(self) -> list[DocumentSummary]:
        return self._flagged(RelevanceFlag.NOT_RELEVANT)

    def _flagged(self, flag: RelevanceFlag) -> list[DocumentSummary]:
        return [s for s in self.summaries if s.relevance_flag is flag]


@dataclass(frozen=True)
class ProgressEvent:
    """One message on the progress channel; only the terminal ``done`` event carries ``result``."""

    stage: Stage
    progress: int
    message: str
    facilities: list[FacilityRecord] | None = None
    count: int | None = None
    current: int | None = None
    total: int | None = None
    latest_summary: DocumentSummary | None = None
    result: ProcessingResult | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload; unset stage-specific fields are omitted."""
        payload = to_jsonable(self)
        return {key: value for key, value in payload.items() if value is not None}


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and tuples into plain JSON types."""
    return asdict(value, dict_factory=_json_dict)


def _json_dict(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: _json_value(value) for key, value in items}


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_json_value(item) for item in value]
    return value
