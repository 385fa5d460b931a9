from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pdfsearch.config.settings import Settings
from pdfsearch.ocr.factory import OcrClientFactory
from pdfsearch.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from pdfsearch.ocr.textract_adapter import TextractClientAdapter
from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.factory import ObjectStoreFactory
from pdfsearch.storage.local_adapter import LocalObjectStore
from pdfsearch.storage.s3_adapter import S3ObjectStore


class TestObjectStoreFactory:
    def test_creates_local_store(self, tmp_path: Path) -> None:
        settings = Settings(storage_backend="local", storage_local_root=str(tmp_path))
        assert isinstance(ObjectStoreFactory.create(settings), LocalObjectStore)

    @patch("pdfsearch.storage.s3_adapter.boto3.client")
    def test_creates_s3_store(self, mock_client: MagicMock) -> None:
        settings = Settings(
            storage_backend="S3",
            aws_s3_bucket_name="bucket",
            aws_region="eu-west-1",
            aws_access_key_id="",
            aws_secret_access_key="",
        )

        store = ObjectStoreFactory.create(settings)

        assert isinstance(store, S3ObjectStore)
        mock_client.assert_called_once_with("s3", region_name="eu-west-1")

    def test_unknown_backend_raises(self) -> None:
        settings = Settings(storage_backend="ftp")
        with pytest.raises(ValueError, match="Unknown storage backend"):
            ObjectStoreFactory.create(settings)


class TestOcrClientFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        settings = Settings(ocr_engine="pdfplumber")
        client = OcrClientFactory.create(settings, MagicMock(spec=BaseObjectStore))
        assert isinstance(client, PdfPlumberOcrAdapter)

    @patch("pdfsearch.ocr.textract_adapter.boto3.client")
    def test_creates_textract_adapter(self, mock_client: MagicMock) -> None:
        settings = Settings(ocr_engine="textract", aws_s3_bucket_name="bucket")

        client = OcrClientFactory.create(settings, MagicMock(spec=BaseObjectStore))

        assert isinstance(client, TextractClientAdapter)
        assert mock_client.call_args.args == ("textract",)

    def test_textract_requires_bucket(self) -> None:
        settings = Settings(ocr_engine="textract", aws_s3_bucket_name="")
        with pytest.raises(ValueError, match="aws_s3_bucket_name"):
            OcrClientFactory.create(settings, MagicMock(spec=BaseObjectStore))

    def test_unknown_engine_raises(self) -> None:
        settings = Settings(ocr_engine="tesseract")
        with pytest.raises(ValueError, match="Unknown OCR engine"):
            OcrClientFactory.create(settings, MagicMock(spec=BaseObjectStore))
