"""
SQLite connection management.

Provides a context manager ``get_connection()`` that:
  - Sets a busy timeout to handle lock contention gracefully.
  - Uses ``sqlite3.Row`` factory so rows behave like dicts.
  - Commits on clean exit, rolls back on exception.

Usage::

    from csv_shuffle.db import get_connection

    with get_connection("data.sqlite") as conn:
        conn.execute("INSERT INTO ...")
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: Union[str, Path],
    busy_timeout_ms: int = 5000,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    The connection is committed on clean exit and rolled back on exception.
    The database file's parent directories are created if they do not exist.

    Args:
        db_path: Path to the SQLite database file. Use ``":memory:"`` for
            in-memory databases (useful in tests).
        busy_timeout_ms: Milliseconds to wait when the database is locked
            before raising ``OperationalError``.

    Yields:
        An open ``sqlite3.Connection``.
    """
    db_path = str(db_path)
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row

    try:
        conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")
        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Return True if ``table`` exists in the connected database."""
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    ).fetchone()
    return row is not None


def run_query(conn: sqlite3.Connection, sql: str) -> tuple[list[str], Generator[list[str], None, None]]:
    """Execute ``sql`` and return its column names plus a lazy row stream.

    Values are rendered as text (``NULL`` → ``""``) so the rows can be fed
    straight into the printer.
    """
    cursor = conn.execute(sql)
    col_names = [d[0] for d in cursor.description or []]

    def rows() -> Generator[list[str], None, None]:
        for record in cursor:
            yield ["" if v is None else str(v) for v in record]

    return col_names, rows()
