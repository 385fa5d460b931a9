from collections.abc import Mapping
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from pdfsearch.database.connection import Database
from pdfsearch.database.exceptions import (
    DocumentNotFoundError,
    DuplicateDocumentIdError,
    SearchError,
    StoreError,
)
from pdfsearch.database.models import DocumentRecord, DocumentStatus
from pdfsearch.logging.logger import Log

_COLUMNS = "id, filename, extracted_text, uploaded_at, job_id, status"

MUTABLE_FIELDS = frozenset({"extracted_text", "status", "job_id"})
IMMUTABLE_FIELDS = frozenset({"id", "filename", "uploaded_at"})


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        filename=row["filename"],
        extracted_text=row["extracted_text"] or "",
        uploaded_at=row["uploaded_at"],
        job_id=row["job_id"],
        status=DocumentStatus(row["status"]),
    )


class DocumentRepository:
    """Database operations for the pdf_documents table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, record: DocumentRecord) -> DocumentRecord:
        """Insert a new document record.

        Raises:
            DuplicateDocumentIdError: if a record with the same id exists.
        """
        try:
            with self._db.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO pdf_documents
                            (id, filename, extracted_text, uploaded_at, job_id, status)
                        VALUES (%s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            record.id,
                            record.filename,
                            record.extracted_text,
                            record.uploaded_at,
                            record.job_id,
                            record.status.value,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise DuplicateDocumentIdError(f"Document {record.id} already exists") from exc

        if row is None:
            raise RuntimeError(f"Insert of document {record.id} returned no row")
        return _to_record(row)

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by id.

        Raises:
            DocumentNotFoundError: if no document with this id exists.
        """
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM pdf_documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    def update(self, document_id: str, changes: Mapping[str, object]) -> DocumentRecord:
        """Merge the supplied fields into an existing record and return it.

        The merge is a single UPDATE ... RETURNING statement, so concurrent
        updates to the same id never interleave a read and a write. Immutable
        fields (id, filename, uploaded_at) are ignored when supplied.

        Raises:
            DocumentNotFoundError: if no document with this id exists.
            ValueError: on unknown field names or an invalid status.
        """
        columns = self._mutable_columns(changes)
        if not columns:
            return self.find_by_id(document_id)

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder())
            for name in columns
        )
        query = sql.SQL(
            "UPDATE pdf_documents SET {} WHERE id = {} RETURNING " + _COLUMNS
        ).format(assignments, sql.Placeholder())
        params = (*columns.values(), document_id)

        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    def get_all(self) -> list[DocumentRecord]:
        """Return every record, most recently uploaded first.

        Raises:
            StoreError: if the records cannot be read.
        """
        try:
            with self._db.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_COLUMNS} FROM pdf_documents ORDER BY uploaded_at DESC"
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise StoreError(f"Failed to list documents: {exc}") from exc
        return [_to_record(row) for row in rows]

    def search(self, query: str) -> list[DocumentRecord]:
        """Find completed documents whose text matches the query.

        Tries the tokenized text index first. Zero hits or an index failure
        fall back to a case-insensitive substring scan, which also catches
        matches spanning token boundaries or punctuation.

        Raises:
            SearchError: if the substring fallback fails as well.
        """
        try:
            rows = self._full_text_search(query)
        except psycopg.Error as exc:
            Log.warning(f"Full-text search failed, falling back to substring match: {exc}")
            rows = []

        if not rows:
            Log.debug("No full-text hits, trying substring match", query=repr(query))
            try:
                rows = self._substring_search(query)
            except psycopg.Error as exc:
                raise SearchError(f"Failed to search documents: {exc}") from exc

        return [_to_record(row) for row in rows]

    def _full_text_search(self, query: str) -> list[dict[str, Any]]:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM pdf_documents
                    WHERE status = %s
                      AND to_tsvector('simple', extracted_text)
                          @@ plainto_tsquery('simple', %s)
                    """,
                    (DocumentStatus.COMPLETED.value, query),
                )
                return cur.fetchall()

    def _substring_search(self, query: str) -> list[dict[str, Any]]:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM pdf_documents
                    WHERE status = %s
                      AND extracted_text ILIKE %s ESCAPE '\\'
                    """,
                    (DocumentStatus.COMPLETED.value, f"%{escape_like(query)}%"),
                )
                return cur.fetchall()

    @staticmethod
    def _mutable_columns(changes: Mapping[str, object]) -> dict[str, object]:
        unknown = set(changes) - MUTABLE_FIELDS - IMMUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown document fields: {sorted(unknown)}")

        columns: dict[str, object] = {}
        for name in sorted(MUTABLE_FIELDS & set(changes)):
            value = changes[name]
            if name == "status":
                value = DocumentStatus(value).value
            columns[name] = value
        return columns
