from pdfsearch.database.connection import Database
from pdfsearch.logging.logger import Log

TABLE_NAME = "pdf_documents"

# Text index uses the 'simple' configuration so matching lowercases tokens
# without language-specific stemming; search queries must use the same one.
SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS pdf_documents (
        id TEXT PRIMARY KEY,
        filename TEXT NOT NULL,
        extracted_text TEXT NOT NULL DEFAULT '',
        uploaded_at TIMESTAMPTZ NOT NULL,
        job_id TEXT,
        status TEXT NOT NULL DEFAULT 'processing'
            CHECK (status IN ('processing', 'completed', 'failed'))
    )
    """,
    "CREATE INDEX IF NOT EXISTS pdf_documents_status_idx ON pdf_documents (status)",
    "CREATE INDEX IF NOT EXISTS pdf_documents_uploaded_at_idx ON pdf_documents (uploaded_at DESC)",
    "CREATE INDEX IF NOT EXISTS pdf_documents_filename_idx ON pdf_documents (filename)",
    """
    CREATE INDEX IF NOT EXISTS pdf_documents_text_idx
    ON pdf_documents USING GIN (to_tsvector('simple', extracted_text))
    """,
)


def ensure_schema(db: Database) -> None:
    """Create the documents table and its indexes if they do not exist."""
    with db.connection() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.execute(statement)
        conn.commit()
    Log.info("Schema is up to date", table=TABLE_NAME)
