import time
from collections.abc import Callable
from typing import NoReturn

from pdfsearch.config.settings import Settings
from pdfsearch.extraction.models import BackoffPolicy, ExtractedText, ExtractionJob, assemble_text
from pdfsearch.logging.logger import Log
from pdfsearch.ocr.base import BaseOcrClient
from pdfsearch.ocr.exceptions import (
    ExtractionError,
    ExtractionTimeoutError,
    RemoteFailureError,
    SubmissionError,
)
from pdfsearch.ocr.models import JobStatus


class ExtractionOrchestrator:
    """Drives one OCR job from submission to exactly one terminal outcome.

    Flow: submit -> (wait, poll, drain pages)* -> assemble LINE fragments.
    Submission is never retried. The loop ends when the engine reports a
    terminal status or the local timeout, measured from the moment the job
    was accepted, runs out. On timeout the accumulated fragments are dropped.
    """

    def __init__(
        self,
        ocr_client: BaseOcrClient,
        backoff: BackoffPolicy | None = None,
        timeout_seconds: float = 300.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._ocr_client = ocr_client
        self._backoff = backoff or BackoffPolicy()
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, ocr_client: BaseOcrClient) -> "ExtractionOrchestrator":
        return cls(
            ocr_client,
            backoff=BackoffPolicy(
                base_seconds=settings.extraction_backoff_base_seconds,
                factor=settings.extraction_backoff_factor,
                cap_seconds=settings.extraction_backoff_cap_seconds,
            ),
            timeout_seconds=settings.extraction_timeout_seconds,
        )

    def process(self, handle: str) -> ExtractedText:
        """Extract the text of a stored payload.

        Raises:
            SubmissionError: the engine rejected the job (not retried).
            RemoteFailureError: the job failed remotely or could not be polled.
            ExtractionTimeoutError: the job was still running at the timeout.
        """
        job_id = self._submit(handle)
        job = ExtractionJob(handle=handle, job_id=job_id, started_at=self._clock())
        intervals = self._backoff.intervals()

        status = JobStatus.IN_PROGRESS
        while status == JobStatus.IN_PROGRESS:
            remaining = self._remaining(job)
            if remaining <= 0:
                self._timeout(job)
            job.interval = min(next(intervals), remaining)
            self._sleep(job.interval)
            # The wait is clamped to the deadline, so no poll starts after it.
            if self._remaining(job) <= 0:
                self._timeout(job)
            status = self._poll(job)
            Log.debug(
                f"Poll {job.polls}: {status}",
                job_id=job_id,
                fragments=len(job.fragments),
                waited=f"{job.interval:g}s",
            )

        if status == JobStatus.FAILED:
            raise RemoteFailureError(
                "Text extraction job failed. Please check the PDF and try again.",
                job_id=job_id,
            )

        text, line_count = assemble_text(job.fragments)
        Log.info(
            f"Extraction succeeded after {job.polls} polls",
            job_id=job_id,
            lines=line_count,
            chars=len(text),
        )
        return ExtractedText(job_id=job_id, text=text, line_count=line_count)

    def _remaining(self, job: ExtractionJob) -> float:
        return self._timeout_seconds - job.elapsed(self._clock())

    def _timeout(self, job: ExtractionJob) -> NoReturn:
        """Abandon the job and raise; accumulated fragments are dropped."""
        self._abandon(job)
        raise ExtractionTimeoutError(
            f"Text extraction timed out after {self._timeout_seconds:g} seconds. "
            "Document may be too large.",
            job_id=job.job_id,
        )

    def _submit(self, handle: str) -> str:
        try:
            job_id = self._ocr_client.submit(handle)
        except SubmissionError as exc:
            Log.error(f"Extraction job was rejected: {exc}", handle=handle)
            raise
        except Exception as exc:
            raise SubmissionError(f"Failed to start text extraction: {exc}") from exc
        Log.info("Submitted extraction job", job_id=job_id, handle=handle)
        return job_id

    def _poll(self, job: ExtractionJob) -> JobStatus:
        """Poll once, then drain every continuation page without waiting."""
        try:
            result = self._ocr_client.poll(job.job_id)
            job.polls += 1
            job.accept(result.fragments, result.next_token)
            while job.next_token:
                page = self._ocr_client.fetch_page(job.job_id, job.next_token)
                job.accept(page.fragments, page.next_token)
                Log.debug(f"Fetched result page {job.pages}", job_id=job.job_id)
        except ExtractionError as exc:
            if exc.job_id is None:
                exc.job_id = job.job_id
            raise
        except Exception as exc:
            raise RemoteFailureError(
                f"Failed to get text extraction status: {exc}", job_id=job.job_id
            ) from exc
        return result.status

    def _abandon(self, job: ExtractionJob) -> None:
        try:
            abandoned = self._ocr_client.abandon(job.job_id)
        except Exception as exc:
            Log.warning(f"Could not abandon job after timeout: {exc}", job_id=job.job_id)
            return
        if not abandoned:
            Log.warning("Remote job may keep running after the local timeout", job_id=job.job_id)
