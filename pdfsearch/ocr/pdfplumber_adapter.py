import threading
import uuid
from dataclasses import dataclass

from pdfsearch.logging.logger import Log
from pdfsearch.ocr.base import BaseOcrClient
from pdfsearch.ocr.exceptions import InvalidDocumentReferenceError, RemoteFailureError
from pdfsearch.ocr.models import FragmentKind, JobStatus, PollResult, ResultPage, TextFragment
from pdfsearch.pdf.exceptions import PdfReadError
from pdfsearch.pdf.pdfplumber_reader import PdfPlumberReader
from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.exceptions import ObjectStoreError


@dataclass
class _LocalJob:
    status: JobStatus
    fragments: list[TextFragment]


class PdfPlumberOcrAdapter(BaseOcrClient):
    """Local stand-in for a remote OCR engine.

    Extracts embedded text with pdfplumber at submit time and then serves it
    through the same poll/paginate contract a remote engine exposes. Scanned
    documents without a text layer come back empty.
    """

    def __init__(
        self,
        object_store: BaseObjectStore,
        reader: PdfPlumberReader,
        page_size: int = 1000,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._object_store = object_store
        self._reader = reader
        self._page_size = page_size
        self._jobs: dict[str, _LocalJob] = {}
        self._lock = threading.Lock()

    def submit(self, handle: str) -> str:
        try:
            payload = self._object_store.load(handle)
        except ObjectStoreError as exc:
            raise InvalidDocumentReferenceError(f"Cannot read payload {handle}: {exc}") from exc

        job_id = uuid.uuid4().hex
        try:
            pages = self._reader.extract_lines(payload)
            job = _LocalJob(JobStatus.SUCCEEDED, self._to_fragments(pages))
        except PdfReadError as exc:
            Log.warning(f"Local OCR job failed: {exc}", job_id=job_id)
            job = _LocalJob(JobStatus.FAILED, [])

        with self._lock:
            self._jobs[job_id] = job
        return job_id

    def poll(self, job_id: str) -> PollResult:
        job = self._get_job(job_id)
        page = self._page(job_id, job, 0)
        return PollResult(status=job.status, fragments=page.fragments, next_token=page.next_token)

    def fetch_page(self, job_id: str, next_token: str) -> ResultPage:
        job = self._get_job(job_id)
        try:
            offset = int(next_token)
        except ValueError as exc:
            raise RemoteFailureError(f"Invalid continuation token '{next_token}'", job_id=job_id) from exc
        return self._page(job_id, job, offset)

    def abandon(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None

    def close(self) -> None:
        with self._lock:
            self._jobs.clear()

    def _get_job(self, job_id: str) -> _LocalJob:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise RemoteFailureError(f"Unknown local OCR job {job_id}", job_id=job_id)
        return job

    def _page(self, job_id: str, job: _LocalJob, offset: int) -> ResultPage:
        end = offset + self._page_size
        fragments = job.fragments[offset:end]
        if end < len(job.fragments):
            return ResultPage(fragments=fragments, next_token=str(end))
        # Last page served, the job has nothing more to hand out.
        with self._lock:
            self._jobs.pop(job_id, None)
        return ResultPage(fragments=fragments, next_token=None)

    @staticmethod
    def _to_fragments(pages: list[list[str]]) -> list[TextFragment]:
        fragments: list[TextFragment] = []
        for lines in pages:
            fragments.append(TextFragment(kind=FragmentKind.PAGE))
            fragments.extend(TextFragment(kind=FragmentKind.LINE, text=line) for line in lines)
        return fragments
