import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum


class DocumentStatus(StrEnum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentStatus.PROCESSING


@dataclass
class DocumentRecord:
    """Represents a row from the pdf_documents table."""

    id: str
    filename: str
    uploaded_at: datetime
    extracted_text: str = ""
    status: DocumentStatus = DocumentStatus.PROCESSING
    job_id: str | None = None

    @classmethod
    def new(cls, filename: str, uploaded_at: datetime | None = None) -> "DocumentRecord":
        """Build a fresh record in the processing state with a generated id."""
        return cls(
            id=str(uuid.uuid4()),
            filename=filename,
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
        )
