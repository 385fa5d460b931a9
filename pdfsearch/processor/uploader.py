from collections.abc import Callable
from datetime import datetime, timezone

from pdfsearch.database.models import DocumentRecord
from pdfsearch.database.repositories.document_repository import DocumentRepository
from pdfsearch.logging.logger import Log
from pdfsearch.pdf.exceptions import PdfReadError
from pdfsearch.pdf.pdfplumber_reader import PdfPlumberReader
from pdfsearch.processor.exceptions import InputValidationError
from pdfsearch.processor.models import SubmittedDocument
from pdfsearch.storage.base import BaseObjectStore, build_object_key
from pdfsearch.storage.exceptions import ObjectStoreError

PDF_CONTENT_TYPE = "application/pdf"


class DocumentUploader:
    """Validates an upload, stores the payload and creates its record."""

    def __init__(
        self,
        object_store: BaseObjectStore,
        doc_repo: DocumentRepository,
        pdf_reader: PdfPlumberReader,
        key_prefix: str = "temp-pdfs",
        max_size_bytes: int = 500 * 1024 * 1024,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._object_store = object_store
        self._doc_repo = doc_repo
        self._pdf_reader = pdf_reader
        self._key_prefix = key_prefix
        self._max_size_bytes = max_size_bytes
        self._now = now

    def submit(
        self,
        filename: str,
        payload: bytes,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> SubmittedDocument:
        """Store a PDF temporarily and create its record in 'processing' state.

        Raises:
            InputValidationError: if the filename, content type or payload is invalid.
            ObjectStoreError: if the payload cannot be stored.
            DuplicateDocumentIdError: if the generated id collides.
        """
        page_count = self._validate(filename, payload, content_type)

        record = DocumentRecord.new(filename, uploaded_at=self._now())
        key = build_object_key(self._key_prefix, record.id, filename, record.uploaded_at)
        handle = self._object_store.store(key, payload)

        try:
            record = self._doc_repo.create(record)
        except Exception:
            self._discard(handle)
            raise

        Log.info(
            f"Accepted '{filename}'",
            document_id=record.id,
            bytes=len(payload),
            pages=page_count,
        )
        return SubmittedDocument(record=record, handle=handle)

    def _validate(self, filename: str, payload: bytes, content_type: str) -> int:
        if not filename or not filename.strip():
            raise InputValidationError("Missing filename")
        if content_type != PDF_CONTENT_TYPE:
            raise InputValidationError("Only PDF files are allowed")
        if not isinstance(payload, bytes):
            raise InputValidationError("Payload must be raw bytes")
        if not payload:
            raise InputValidationError("Uploaded file is empty")
        if len(payload) > self._max_size_bytes:
            raise InputValidationError(
                f"File exceeds the {self._max_size_bytes // (1024 * 1024)} MB upload limit"
            )
        try:
            page_count = self._pdf_reader.page_count(payload)
        except PdfReadError as exc:
            raise InputValidationError(f"File is not a readable PDF: {exc}") from exc
        if page_count == 0:
            raise InputValidationError("PDF has no pages")
        return page_count

    def _discard(self, handle: str) -> None:
        try:
            self._object_store.delete(handle)
        except ObjectStoreError as exc:
            Log.error(f"Failed to delete orphaned payload: {exc}", handle=handle)
