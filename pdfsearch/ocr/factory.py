from pdfsearch.config.settings import Settings
from pdfsearch.ocr.base import BaseOcrClient
from pdfsearch.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from pdfsearch.ocr.textract_adapter import TextractClientAdapter
from pdfsearch.pdf.pdfplumber_reader import PdfPlumberReader
from pdfsearch.storage.base import BaseObjectStore


class OcrClientFactory:
    """Creates the OCR client configured by ocr_engine."""

    ENGINES = ("textract", "pdfplumber")

    @classmethod
    def create(cls, settings: Settings, object_store: BaseObjectStore) -> BaseOcrClient:
        engine = settings.ocr_engine.lower()
        if engine == "textract":
            return TextractClientAdapter(
                bucket=settings.aws_s3_bucket_name,
                region=settings.aws_region,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
            )
        if engine == "pdfplumber":
            return PdfPlumberOcrAdapter(
                object_store=object_store,
                reader=PdfPlumberReader(),
                page_size=settings.ocr_local_page_size,
            )
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
