from dataclasses import dataclass, field
from enum import Enum


class ExtractionMethod(str, Enum):
    DIGITAL = "digital"
    OPTICAL = "optical"
    MERGED = "merged"


@dataclass
class ExtractionResult:
    """Text recovered from one document and how it was obtained."""

    text: str
    method: ExtractionMethod
    pages: int
    confidence: float | None = None
    warnings: list[str] = field(default_factory=list)
