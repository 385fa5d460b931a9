class ExtractionError(Exception):
    """Base exception for every terminal extraction outcome other than success."""

    def __init__(self, message: str, job_id: str | None = None) -> None:
        super().__init__(message)
        self.job_id = job_id


class SubmissionError(ExtractionError):
    """Raised when the OCR service rejects a job submission."""


class SubmissionThrottledError(SubmissionError):
    """Raised when the OCR service throttles the caller."""


class DocumentTooLargeError(SubmissionError):
    """Raised when the document exceeds the OCR service size limits."""


class InvalidDocumentReferenceError(SubmissionError):
    """Raised when the object handle cannot be resolved by the OCR service."""


class RemoteFailureError(ExtractionError):
    """Raised when an accepted job fails on the remote side."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when a job is still in progress after the local timeout."""
