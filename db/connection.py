"""
db/connection.py
----------------
Manages the PostgreSQL connection pool that backs the record store.
Uses psycopg2's SimpleConnectionPool for efficient connection reuse.
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = 1, max_conn: int = 3, dsn: str = DATABASE_URL) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.
        dsn: Connection string, defaults to DATABASE_URL from the environment.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


@contextmanager
def transaction() -> Iterator:
    """
    Borrow a pooled connection and yield a cursor inside one transaction.

    Commits when the block exits cleanly, rolls back and re-raises otherwise,
    and always hands the connection back to the pool.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    conn = _pool.getconn()
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")
