from abc import ABC, abstractmethod

from pdfsearch.ocr.models import PollResult, ResultPage


class BaseOcrClient(ABC):
    """Contract for asynchronous OCR engine adapters."""

    @abstractmethod
    def submit(self, handle: str) -> str:
        """Start a text detection job for a stored payload.

        Args:
            handle: Object store key of the uploaded PDF.

        Returns:
            The engine-assigned job id.

        Raises:
            SubmissionError: or one of its subtypes when the job is rejected.
        """

    @abstractmethod
    def poll(self, job_id: str) -> PollResult:
        """Return the job status and the first page of fragments.

        Raises:
            RemoteFailureError: if the status cannot be retrieved.
        """

    @abstractmethod
    def fetch_page(self, job_id: str, next_token: str) -> ResultPage:
        """Return the page of fragments addressed by a continuation token.

        Raises:
            RemoteFailureError: if the page cannot be retrieved.
        """

    def abandon(self, job_id: str) -> bool:
        """Ask the engine to stop a job. Returns False when unsupported."""
        return False

    def close(self) -> None:
        """Release underlying connections."""
