from pdfsearch.database.models import DocumentStatus
from pdfsearch.database.repositories.document_repository import DocumentRepository
from pdfsearch.extraction.orchestrator import ExtractionOrchestrator
from pdfsearch.logging.logger import Log
from pdfsearch.ocr.exceptions import ExtractionError
from pdfsearch.processor.models import ExtractionRequest, ProcessingOutcome
from pdfsearch.storage.base import BaseObjectStore


class DocumentProcessor:
    """Runs extraction for one document and records the outcome.

    Pipeline: orchestrate -> update record -> delete payload.
    The record always leaves the processing state: when the completed update
    cannot be written, a failed update is attempted instead. Status updates
    and payload deletion are independent side effects, and neither masks the
    error returned to the caller.
    """

    def __init__(
        self,
        orchestrator: ExtractionOrchestrator,
        doc_repo: DocumentRepository,
        object_store: BaseObjectStore,
    ) -> None:
        self._orchestrator = orchestrator
        self._doc_repo = doc_repo
        self._object_store = object_store

    def process(self, request: ExtractionRequest) -> ProcessingOutcome:
        """Extract text for a submitted document.

        Raises:
            ExtractionError: after the record has been marked failed.
            StoreError: if the completed result cannot be persisted; the
                record is marked failed on a best-effort basis first.
        """
        Log.info("Processing document", document_id=request.document_id, handle=request.handle)

        try:
            extracted = self._orchestrator.process(request.handle)
        except ExtractionError as exc:
            Log.error(f"Extraction failed: {exc}", document_id=request.document_id)
            self._mark_failed(request, exc.job_id)
            self._discard_payload(request)
            raise

        try:
            self._doc_repo.update(
                request.document_id,
                {
                    "extracted_text": extracted.text,
                    "status": DocumentStatus.COMPLETED,
                    "job_id": extracted.job_id,
                },
            )
        except Exception as exc:
            Log.error(
                f"Failed to store extracted text: {exc}",
                document_id=request.document_id,
                job_id=extracted.job_id,
            )
            self._mark_failed(request, extracted.job_id)
            raise
        finally:
            self._discard_payload(request)

        Log.info(
            "Document completed",
            document_id=request.document_id,
            job_id=extracted.job_id,
            chars=len(extracted.text),
        )
        return ProcessingOutcome(
            document_id=request.document_id,
            status=DocumentStatus.COMPLETED,
            job_id=extracted.job_id,
            extracted_text_length=len(extracted.text),
        )

    def _mark_failed(self, request: ExtractionRequest, job_id: str | None) -> None:
        changes: dict[str, object] = {"status": DocumentStatus.FAILED}
        if job_id is not None:
            changes["job_id"] = job_id
        try:
            self._doc_repo.update(request.document_id, changes)
        except Exception as exc:
            Log.error(f"Failed to mark document as failed: {exc}", document_id=request.document_id)

    def _discard_payload(self, request: ExtractionRequest) -> None:
        try:
            self._object_store.delete(request.handle)
            Log.info("Deleted temporary payload", handle=request.handle)
        except Exception as exc:
            Log.error(f"Failed to delete temporary payload: {exc}", handle=request.handle)
