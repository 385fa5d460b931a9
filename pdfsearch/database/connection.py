from collections.abc import Generator
from contextlib import contextmanager
from types import TracebackType
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from pdfsearch.config.settings import Settings
from pdfsearch.logging.logger import Log


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns a psycopg connection pool with an explicit open/close lifecycle.

    Repositories receive a Database instance instead of reaching for a
    process-wide pool, so tests can substitute a fake.
    """

    def __init__(self, conninfo: str, min_size: int = 1, max_size: int = 10) -> None:
        self._conninfo = conninfo
        self._min_size = min_size
        self._max_size = max_size
        self._pool: ConnectionPool | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            build_conninfo(settings),
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """Create the pool. Calling open twice is a no-op."""
        if self._pool is not None:
            return
        self._pool = ConnectionPool(
            self._conninfo,
            min_size=self._min_size,
            max_size=self._max_size,
            open=True,
        )
        Log.debug("Connection pool opened", max_size=self._max_size)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            Log.debug("Connection pool closed")

    def __enter__(self) -> "Database":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError("Connection pool not initialized. Call open() first.")
        with self._pool.connection() as conn:
            yield conn

    def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except (psycopg.Error, RuntimeError) as exc:
            Log.error(f"Database health check failed: {exc}")
            return False
