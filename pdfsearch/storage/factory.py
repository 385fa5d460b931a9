from pathlib import Path

from pdfsearch.config.settings import Settings
from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.local_adapter import LocalObjectStore
from pdfsearch.storage.s3_adapter import S3ObjectStore


class ObjectStoreFactory:
    """Creates the object store configured by storage_backend."""

    BACKENDS = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "s3":
            return S3ObjectStore(
                bucket=settings.aws_s3_bucket_name,
                region=settings.aws_region,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
            )
        if backend == "local":
            return LocalObjectStore(files_root=Path(settings.storage_local_root))
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
