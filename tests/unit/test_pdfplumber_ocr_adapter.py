from unittest.mock import MagicMock

import pytest

from pdfsearch.ocr.exceptions import InvalidDocumentReferenceError, RemoteFailureError
from pdfsearch.ocr.models import FragmentKind, JobStatus
from pdfsearch.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from pdfsearch.pdf.exceptions import PdfReadError
from pdfsearch.pdf.pdfplumber_reader import PdfPlumberReader
from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.exceptions import ObjectStoreError


def _make_adapter(
    pages: list[list[str]] | None = None,
    page_size: int = 1000,
) -> tuple[PdfPlumberOcrAdapter, MagicMock, MagicMock]:
    object_store = MagicMock(spec=BaseObjectStore)
    object_store.load.return_value = b"%PDF"
    reader = MagicMock(spec=PdfPlumberReader)
    reader.extract_lines.return_value = pages if pages is not None else [["Hello", "World"]]
    adapter = PdfPlumberOcrAdapter(object_store, reader, page_size=page_size)
    return adapter, object_store, reader


class TestSubmit:
    def test_loads_payload_and_returns_job_id(self) -> None:
        adapter, object_store, reader = _make_adapter()

        job_id = adapter.submit("temp-pdfs/1-a.pdf")

        assert job_id
        object_store.load.assert_called_once_with("temp-pdfs/1-a.pdf")
        reader.extract_lines.assert_called_once_with(b"%PDF")

    def test_unreadable_handle_is_invalid_reference(self) -> None:
        adapter, object_store, _reader = _make_adapter()
        object_store.load.side_effect = ObjectStoreError("File not found")

        with pytest.raises(InvalidDocumentReferenceError):
            adapter.submit("missing.pdf")

    def test_unparseable_pdf_becomes_failed_job(self) -> None:
        adapter, _store, reader = _make_adapter()
        reader.extract_lines.side_effect = PdfReadError("broken")

        job_id = adapter.submit("h")

        assert adapter.poll(job_id).status is JobStatus.FAILED


class TestPoll:
    def test_single_page_result(self) -> None:
        adapter, _store, _reader = _make_adapter()
        job_id = adapter.submit("h")

        result = adapter.poll(job_id)

        assert result.status is JobStatus.SUCCEEDED
        assert [(f.kind, f.text) for f in result.fragments] == [
            (FragmentKind.PAGE, ""),
            (FragmentKind.LINE, "Hello"),
            (FragmentKind.LINE, "World"),
        ]
        assert result.next_token is None

    def test_paginates_with_continuation_tokens(self) -> None:
        adapter, _store, _reader = _make_adapter(pages=[["a", "b"], ["c"]], page_size=2)
        job_id = adapter.submit("h")

        first = adapter.poll(job_id)
        second = adapter.fetch_page(job_id, first.next_token or "")
        third = adapter.fetch_page(job_id, second.next_token or "")

        texts = [f.text for page in (first, second, third) for f in page.fragments]
        assert texts == ["", "a", "b", "", "c"]
        assert first.next_token == "2"
        assert second.next_token == "4"
        assert third.next_token is None

    def test_job_is_released_after_last_page(self) -> None:
        adapter, _store, _reader = _make_adapter()
        job_id = adapter.submit("h")
        adapter.poll(job_id)

        with pytest.raises(RemoteFailureError, match="Unknown local OCR job"):
            adapter.poll(job_id)

    def test_unknown_job_is_remote_failure(self) -> None:
        adapter, _store, _reader = _make_adapter()
        with pytest.raises(RemoteFailureError):
            adapter.poll("nope")

    def test_invalid_token_is_remote_failure(self) -> None:
        adapter, _store, _reader = _make_adapter(pages=[["a", "b", "c"]], page_size=1)
        job_id = adapter.submit("h")

        with pytest.raises(RemoteFailureError, match="Invalid continuation token"):
            adapter.fetch_page(job_id, "abc")


class TestLifecycle:
    def test_abandon_drops_job(self) -> None:
        adapter, _store, _reader = _make_adapter()
        job_id = adapter.submit("h")

        assert adapter.abandon(job_id) is True
        assert adapter.abandon(job_id) is False

    def test_rejects_non_positive_page_size(self) -> None:
        with pytest.raises(ValueError):
            PdfPlumberOcrAdapter(MagicMock(), MagicMock(), page_size=0)


class TestWithRealPdf:
    def test_extracts_embedded_text(self, multi_page_pdf_bytes: bytes) -> None:
        object_store = MagicMock(spec=BaseObjectStore)
        object_store.load.return_value = multi_page_pdf_bytes
        adapter = PdfPlumberOcrAdapter(object_store, PdfPlumberReader())

        job_id = adapter.submit("h")
        lines = [f.text for f in adapter.poll(job_id).fragments if f.kind is FragmentKind.LINE]

        assert lines == ["Page one content", "Page two content"]
