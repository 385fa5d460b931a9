from datetime import datetime, timedelta, timezone

import pytest

from pdfsearch.database.exceptions import DocumentNotFoundError, DuplicateDocumentIdError
from pdfsearch.database.models import DocumentRecord, DocumentStatus
from pdfsearch.database.repositories.document_repository import DocumentRepository
from tests.factories import make_record

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.integration
class TestCreateAndFind:
    def test_round_trips_record(self, doc_repo: DocumentRepository) -> None:
        record = DocumentRecord.new("report.pdf", uploaded_at=BASE_TIME)

        doc_repo.create(record)
        found = doc_repo.find_by_id(record.id)

        assert found == record

    def test_duplicate_id_raises(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1"))
        with pytest.raises(DuplicateDocumentIdError):
            doc_repo.create(make_record("doc-1"))

    def test_missing_id_raises(self, doc_repo: DocumentRepository) -> None:
        with pytest.raises(DocumentNotFoundError, match="nope not found"):
            doc_repo.find_by_id("nope")


@pytest.mark.integration
class TestUpdate:
    def test_merges_fields(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1", status=DocumentStatus.PROCESSING))

        updated = doc_repo.update(
            "doc-1",
            {"extracted_text": "hello", "status": DocumentStatus.COMPLETED, "job_id": "j"},
        )

        assert updated.extracted_text == "hello"
        assert updated.status is DocumentStatus.COMPLETED
        assert doc_repo.find_by_id("doc-1").job_id == "j"

    def test_immutable_fields_are_kept(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1", filename="a.pdf"))

        updated = doc_repo.update("doc-1", {"filename": "b.pdf", "job_id": "j"})

        assert updated.filename == "a.pdf"
        assert updated.uploaded_at == BASE_TIME

    def test_missing_id_raises(self, doc_repo: DocumentRepository) -> None:
        with pytest.raises(DocumentNotFoundError):
            doc_repo.update("nope", {"status": DocumentStatus.FAILED})


@pytest.mark.integration
class TestListingAndSearch:
    def test_get_all_newest_first(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("old", uploaded_at=BASE_TIME))
        doc_repo.create(make_record("new", uploaded_at=BASE_TIME + timedelta(days=1)))

        assert [r.id for r in doc_repo.get_all()] == ["new", "old"]

    def test_token_match(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1", extracted_text="Quarterly Invoice total"))

        assert [r.id for r in doc_repo.search("invoice")] == ["doc-1"]

    def test_substring_fallback(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1", extracted_text="Hello World example"))

        assert [r.id for r in doc_repo.search("wor")] == ["doc-1"]

    def test_wildcards_are_literal(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("pct", extracted_text="rate is 50% today"))
        doc_repo.create(make_record("plain", extracted_text="rate is 500 today"))

        assert [r.id for r in doc_repo.search("50%")] == ["pct"]

    def test_only_completed_documents_match(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("done", extracted_text="alpha"))
        doc_repo.create(
            make_record("busy", extracted_text="alpha", status=DocumentStatus.PROCESSING)
        )
        doc_repo.create(make_record("bad", extracted_text="alpha", status=DocumentStatus.FAILED))

        assert [r.id for r in doc_repo.search("alpha")] == ["done"]

    def test_no_matches(self, doc_repo: DocumentRepository) -> None:
        doc_repo.create(make_record("doc-1", extracted_text="alpha"))
        assert doc_repo.search("zzz") == []
