from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "pdf_extractor"
    db_username: str = "pdf_extractor"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    storage_backend: str = "s3"
    storage_local_root: str = "/app/files"
    storage_key_prefix: str = "temp-pdfs"

    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_s3_bucket_name: str = ""

    ocr_engine: str = "textract"
    ocr_local_page_size: int = 1000

    extraction_backoff_base_seconds: float = 2.0
    extraction_backoff_factor: float = 1.5
    extraction_backoff_cap_seconds: float = 30.0
    extraction_timeout_seconds: float = 300.0

    max_upload_size_mb: int = 500

    search_min_query_length: int = 2
    search_preview_context_chars: int = 50

    ingest_concurrency: int = 4
