"""
db/connection.py
----------------
Connection provider for the data-access layer.
Wraps psycopg2's SimpleConnectionPool behind a small data-source object
(`get_connection` / `release_connection`) that repositories receive.
"""

from typing import Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import connection as PgConnection

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)


class PooledDataSource:
    """Hands out pooled connections in auto-commit mode."""

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 5):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: Optional[pool.SimpleConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """
        Create the underlying pool. Does nothing if it is already open.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.SimpleConnectionPool(self.min_conn, self.max_conn, self.dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def get_connection(self) -> PgConnection:
        """
        Check a connection out of the pool.

        The connection is switched to auto-commit so that each statement
        commits on its own unless the caller opens a transaction.
        """
        if self._pool is None:
            self.open()
        conn = self._pool.getconn()
        conn.autocommit = True
        return conn

    def release_connection(self, conn: PgConnection) -> None:
        """Return a connection back to the pool."""
        if self._pool is not None:
            self._pool.putconn(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")


_data_source: Optional[PooledDataSource] = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> PooledDataSource:
    """
    Initialize the process-wide data source and open its pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Returns:
        The default PooledDataSource.
    """
    global _data_source
    if _data_source is None:
        _data_source = PooledDataSource(DATABASE_URL, min_conn, max_conn)
    _data_source.open()
    return _data_source


def get_data_source() -> PooledDataSource:
    """
    Return the process-wide data source.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _data_source is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _data_source


def get_connection() -> PgConnection:
    """Get a connection from the default data source."""
    return get_data_source().get_connection()


def release_connection(conn: PgConnection) -> None:
    """Return a connection to the default data source."""
    if _data_source is not None:
        _data_source.release_connection(conn)


def close_pool() -> None:
    """Close the default data source and forget it."""
    global _data_source
    if _data_source is not None:
        _data_source.close()
        _data_source = None
