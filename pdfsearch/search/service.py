from pdfsearch.database.models import DocumentRecord, DocumentStatus
from pdfsearch.database.repositories.document_repository import DocumentRepository
from pdfsearch.logging.logger import Log
from pdfsearch.processor.exceptions import InputValidationError
from pdfsearch.search.models import DocumentSummary, SearchResponse
from pdfsearch.search.ranking import DEFAULT_CONTEXT_CHARS, rank_results


class DocumentSearchService:
    """Read side: search, listing and single-document lookup."""

    def __init__(
        self,
        doc_repo: DocumentRepository,
        min_query_length: int = 2,
        context_chars: int = DEFAULT_CONTEXT_CHARS,
    ) -> None:
        self._doc_repo = doc_repo
        self._min_query_length = min_query_length
        self._context_chars = context_chars

    def search(self, query: str | None) -> SearchResponse:
        """Search completed documents and rank the hits.

        Raises:
            InputValidationError: if the query is shorter than the minimum length.
            SearchError: if the store cannot run the search.
        """
        cleaned = (query or "").strip()
        if len(cleaned) < self._min_query_length:
            raise InputValidationError(
                f"Query must be at least {self._min_query_length} characters"
            )

        records = self._doc_repo.search(cleaned)
        results = rank_results(records, cleaned, self._context_chars)
        Log.info("Search finished", query=repr(cleaned), results=len(results))
        return SearchResponse(query=cleaned, results=results)

    def list_completed(self) -> list[DocumentSummary]:
        """Completed documents, newest first, without their text."""
        return [
            DocumentSummary.from_record(record)
            for record in self._doc_repo.get_all()
            if record.status == DocumentStatus.COMPLETED
        ]

    def get(self, document_id: str) -> DocumentRecord:
        return self._doc_repo.find_by_id(document_id)
