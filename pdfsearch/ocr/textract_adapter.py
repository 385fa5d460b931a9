from typing import Any, ClassVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pdfsearch.logging.logger import Log
from pdfsearch.ocr.base import BaseOcrClient
from pdfsearch.ocr.exceptions import (
    DocumentTooLargeError,
    InvalidDocumentReferenceError,
    RemoteFailureError,
    SubmissionError,
    SubmissionThrottledError,
)
from pdfsearch.ocr.models import FragmentKind, JobStatus, PollResult, ResultPage, TextFragment


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class TextractClientAdapter(BaseOcrClient):
    """OCR adapter built on AWS Textract asynchronous text detection."""

    THROTTLING_CODES: ClassVar[frozenset[str]] = frozenset(
        {
            "ThrottlingException",
            "ProvisionedThroughputExceededException",
            "LimitExceededException",
        }
    )
    INVALID_REFERENCE_CODES: ClassVar[frozenset[str]] = frozenset(
        {"InvalidS3ObjectException"}
    )

    # PARTIAL_SUCCESS still yields usable blocks, so it counts as success.
    STATUS_MAP: ClassVar[dict[str, JobStatus]] = {
        "IN_PROGRESS": JobStatus.IN_PROGRESS,
        "SUCCEEDED": JobStatus.SUCCEEDED,
        "PARTIAL_SUCCESS": JobStatus.SUCCEEDED,
        "FAILED": JobStatus.FAILED,
    }

    BLOCK_KINDS: ClassVar[dict[str, FragmentKind]] = {
        "PAGE": FragmentKind.PAGE,
        "LINE": FragmentKind.LINE,
        "WORD": FragmentKind.WORD,
    }

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
    ) -> None:
        if not bucket:
            raise ValueError("aws_s3_bucket_name is required for the textract engine")
        self._bucket = bucket
        credentials: dict[str, str] = {}
        if access_key_id and secret_access_key:
            credentials = {
                "aws_access_key_id": access_key_id,
                "aws_secret_access_key": secret_access_key,
            }
        self._client = boto3.client("textract", region_name=region, **credentials)

    def submit(self, handle: str) -> str:
        try:
            response = self._client.start_document_text_detection(
                DocumentLocation={"S3Object": {"Bucket": self._bucket, "Name": handle}}
            )
        except ClientError as exc:
            raise self._submission_error(exc) from exc
        except BotoCoreError as exc:
            raise SubmissionError(f"Failed to start text extraction: {exc}") from exc

        job_id = response.get("JobId")
        if not job_id:
            raise SubmissionError("No JobId returned from StartDocumentTextDetection")
        return str(job_id)

    def poll(self, job_id: str) -> PollResult:
        response = self._get_detection(job_id)
        raw_status = str(response.get("JobStatus", ""))
        status = self.STATUS_MAP.get(raw_status)
        if status is None:
            Log.warning(f"Textract reported unknown status '{raw_status}'", job_id=job_id)
            status = JobStatus.FAILED
        return PollResult(
            status=status,
            fragments=self._fragments(response),
            next_token=response.get("NextToken"),
        )

    def fetch_page(self, job_id: str, next_token: str) -> ResultPage:
        response = self._get_detection(job_id, next_token)
        return ResultPage(
            fragments=self._fragments(response),
            next_token=response.get("NextToken"),
        )

    def close(self) -> None:
        self._client.close()

    def _get_detection(self, job_id: str, next_token: str | None = None) -> dict[str, Any]:
        params: dict[str, str] = {"JobId": job_id}
        if next_token:
            params["NextToken"] = next_token
        try:
            return self._client.get_document_text_detection(**params)
        except (ClientError, BotoCoreError) as exc:
            raise RemoteFailureError(
                f"Failed to get text extraction status: {exc}", job_id=job_id
            ) from exc

    def _submission_error(self, exc: ClientError) -> SubmissionError:
        code = _error_code(exc)
        if code in self.THROTTLING_CODES:
            return SubmissionThrottledError("Textract is throttled. Please try again later.")
        if code == "DocumentTooLargeException":
            return DocumentTooLargeError("PDF document is too large for Textract processing.")
        if code in self.INVALID_REFERENCE_CODES:
            return InvalidDocumentReferenceError(
                "Invalid S3 object. Please check the bucket and key."
            )
        return SubmissionError(f"Failed to start text extraction: {exc}")

    @classmethod
    def _fragments(cls, response: dict[str, Any]) -> list[TextFragment]:
        return [
            TextFragment(
                kind=cls.BLOCK_KINDS.get(block.get("BlockType", ""), FragmentKind.OTHER),
                text=block.get("Text") or "",
            )
            for block in response.get("Blocks") or []
        ]
