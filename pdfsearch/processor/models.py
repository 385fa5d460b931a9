from dataclasses import dataclass

from pdfsearch.database.models import DocumentRecord, DocumentStatus


@dataclass(frozen=True)
class ExtractionRequest:
    """Inputs of one processing request, captured once up front."""

    document_id: str
    handle: str


@dataclass(frozen=True)
class SubmittedDocument:
    """A stored payload and the processing record created for it."""

    record: DocumentRecord
    handle: str

    def extraction_request(self) -> ExtractionRequest:
        return ExtractionRequest(document_id=self.record.id, handle=self.handle)


@dataclass(frozen=True)
class ProcessingOutcome:
    document_id: str
    status: DocumentStatus
    job_id: str | None = None
    extracted_text_length: int = 0
