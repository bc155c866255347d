from dataclasses import dataclass, field


@dataclass(frozen=True)
class FacilityRecord:
    """One facility parsed from the portal's search result table."""

    id: str
    name: str = ""
    address: str = ""
    city: str = ""
    county: str = ""
    zip: str = ""
    programs: tuple[str, ...] = field(default_factory=tuple)
    link: str = ""


@dataclass(frozen=True)
class DocumentDescriptor:
    """One row of the records viewer grid.

    ``id`` is only stable within one enumeration pass and ``row_index`` is
    the row's position in the viewer, which exposes no per-document URL.
    """

    id: str
    type: str = "Document"
    date: str = "Unknown"
    category: str = ""
    description: str = ""
    row_index: int = 0
    viewer_url: str = ""

    @property
    def label(self) -> str:
        return f"{self.type} ({self.date})"


@dataclass(frozen=True)
class RetrievedDocument:
    """Raw PDF bytes obtained for a descriptor, tagged with the strategy used."""

    descriptor: DocumentDescriptor
    content: bytes
    strategy: str
    filename: str = ""
