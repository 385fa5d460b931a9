import os
from collections.abc import Generator
from pathlib import Path

import psycopg
import pytest

from pdfsearch.config.settings import Settings
from pdfsearch.database.connection import Database
from pdfsearch.database.repositories.document_repository import DocumentRepository
from pdfsearch.database.schema import TABLE_NAME, ensure_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "pdfsearch_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_db(test_settings: Settings) -> Generator[Database, None, None]:
    db = Database.from_settings(test_settings)
    try:
        db.open()
        ensure_schema(db)
    except (psycopg.Error, RuntimeError) as e:
        db.close()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one")
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clean_db(integration_db: Database) -> Generator[Database, None, None]:
    with integration_db.connection() as conn:
        conn.execute(f"DELETE FROM {TABLE_NAME}")
        conn.commit()
    yield integration_db
    with integration_db.connection() as conn:
        conn.execute(f"DELETE FROM {TABLE_NAME}")
        conn.commit()


@pytest.fixture
def doc_repo(clean_db: Database) -> DocumentRepository:
    return DocumentRepository(clean_db)


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path
