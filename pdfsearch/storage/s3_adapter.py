import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.exceptions import ObjectStoreError


class S3ObjectStore(BaseObjectStore):
    """Temporary PDF storage in an S3 bucket. The handle is the object key."""

    CONTENT_TYPE = "application/pdf"

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
    ) -> None:
        if not bucket:
            raise ValueError("aws_s3_bucket_name is required for the s3 storage backend")
        self._bucket = bucket
        credentials: dict[str, str] = {}
        if access_key_id and secret_access_key:
            credentials = {
                "aws_access_key_id": access_key_id,
                "aws_secret_access_key": secret_access_key,
            }
        self._client = boto3.client("s3", region_name=region, **credentials)

    def store(self, key: str, payload: bytes) -> str:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=payload,
                ContentType=self.CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"Failed to upload file to S3: {exc}") from exc
        return key

    def load(self, handle: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=handle)
            return response["Body"].read()
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"Failed to download file from S3: {exc}") from exc

    def delete(self, handle: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=handle)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"Failed to delete file from S3: {exc}") from exc

    def close(self) -> None:
        self._client.close()
