from dataclasses import dataclass, field
from datetime import datetime

from pdfsearch.database.models import DocumentRecord, DocumentStatus


@dataclass(frozen=True)
class SearchResult:
    """A matching document with a preview of the first match."""

    id: str
    filename: str
    uploaded_at: datetime
    match_preview: str
    extracted_text: str


@dataclass(frozen=True)
class SearchResponse:
    query: str
    results: list[SearchResult] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class DocumentSummary:
    """Listing entry. Extracted text is deliberately left out."""

    id: str
    filename: str
    uploaded_at: datetime
    status: DocumentStatus

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentSummary":
        return cls(
            id=record.id,
            filename=record.filename,
            uploaded_at=record.uploaded_at,
            status=record.status,
        )
