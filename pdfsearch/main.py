import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from pdfsearch.config.settings import Settings
from pdfsearch.database.connection import Database
from pdfsearch.database.exceptions import StoreError
from pdfsearch.database.repositories.document_repository import DocumentRepository
from pdfsearch.database.schema import ensure_schema
from pdfsearch.extraction.orchestrator import ExtractionOrchestrator
from pdfsearch.logging.logger import Log
from pdfsearch.ocr.base import BaseOcrClient
from pdfsearch.ocr.exceptions import ExtractionError
from pdfsearch.ocr.factory import OcrClientFactory
from pdfsearch.pdf.pdfplumber_reader import PdfPlumberReader
from pdfsearch.processor.exceptions import ProcessorError
from pdfsearch.processor.processor import DocumentProcessor
from pdfsearch.processor.uploader import DocumentUploader
from pdfsearch.search.service import DocumentSearchService
from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.exceptions import ObjectStoreError
from pdfsearch.storage.factory import ObjectStoreFactory


@dataclass
class Services:
    """Explicitly constructed collaborators for one process."""

    object_store: BaseObjectStore
    ocr_client: BaseOcrClient
    uploader: DocumentUploader
    processor: DocumentProcessor
    search: DocumentSearchService

    def close(self) -> None:
        self.ocr_client.close()
        self.object_store.close()


def build_services(settings: Settings, db: Database) -> Services:
    """Wire repositories, adapters and handlers from settings."""
    doc_repo = DocumentRepository(db)
    object_store = ObjectStoreFactory.create(settings)
    ocr_client = OcrClientFactory.create(settings, object_store)
    orchestrator = ExtractionOrchestrator.from_settings(settings, ocr_client)
    return Services(
        object_store=object_store,
        ocr_client=ocr_client,
        uploader=DocumentUploader(
            object_store=object_store,
            doc_repo=doc_repo,
            pdf_reader=PdfPlumberReader(),
            key_prefix=settings.storage_key_prefix,
            max_size_bytes=settings.max_upload_size_mb * 1024 * 1024,
        ),
        processor=DocumentProcessor(orchestrator, doc_repo, object_store),
        search=DocumentSearchService(
            doc_repo,
            min_query_length=settings.search_min_query_length,
            context_chars=settings.search_preview_context_chars,
        ),
    )


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, default=_json_default, indent=2))


def ingest_file(services: Services, path: Path) -> dict[str, object]:
    """Submit and process one file, returning a printable result."""
    try:
        submitted = services.uploader.submit(path.name, path.read_bytes())
        outcome = services.processor.process(submitted.extraction_request())
    except (OSError, ProcessorError, ObjectStoreError, StoreError, ExtractionError) as exc:
        return {"file": str(path), "success": False, "error": str(exc)}
    return {"file": str(path), "success": True, **asdict(outcome)}


def _run_ingest(services: Services, paths: list[Path], concurrency: int) -> int:
    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
        results = list(pool.map(lambda path: ingest_file(services, path), paths))
    _print_json(results)
    return 0 if all(result["success"] for result in results) else 1


def _run_search(services: Services, query: str) -> int:
    try:
        response = services.search.search(query)
    except ProcessorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except StoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    _print_json(
        {
            "query": response.query,
            "results": [asdict(result) for result in response.results],
            "total_results": response.total_results,
        }
    )
    return 0


def _run_list(services: Services) -> int:
    try:
        documents = services.search.list_completed()
    except StoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    _print_json({"pdfs": [asdict(doc) for doc in documents], "total": len(documents)})
    return 0


def _run_show(services: Services, document_id: str) -> int:
    try:
        record = services.search.get(document_id)
    except StoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    _print_json(asdict(record))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdfsearch", description="Extract and search PDF text")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init-db", help="create the documents table and indexes")
    commands.add_parser("health", help="check database connectivity")
    ingest = commands.add_parser("ingest", help="upload, extract and index PDF files")
    ingest.add_argument("paths", nargs="+", type=Path)
    search = commands.add_parser("search", help="full-text search over completed documents")
    search.add_argument("query")
    commands.add_parser("list", help="list completed documents")
    show = commands.add_parser("show", help="print one document record")
    show.add_argument("document_id")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> database -> services -> command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    with Database.from_settings(settings) as db:
        if args.command == "init-db":
            ensure_schema(db)
            return 0
        if args.command == "health":
            healthy = db.ping()
            _print_json({"database": "ok" if healthy else "unavailable"})
            return 0 if healthy else 1

        services = build_services(settings, db)
        try:
            if args.command == "ingest":
                return _run_ingest(services, args.paths, settings.ingest_concurrency)
            if args.command == "search":
                return _run_search(services, args.query)
            if args.command == "list":
                return _run_list(services)
            return _run_show(services, args.document_id)
        finally:
            services.close()


if __name__ == "__main__":
    sys.exit(main())
