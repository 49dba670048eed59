"""
CSV → SQLite table.

Two passes over the input:

1. ``calc_stats()`` counts how each column's fields parse, and the most common
   non-null type becomes the column's SQLite type (``TEXT``, ``INTEGER`` or
   ``REAL``).
2. Rows are inserted in batches with a parameterised ``INSERT``; empty fields
   become ``NULL`` and numeric fields are stored as numbers.

Column and table names are sanitised (see :func:`sql_sanitize`) and always
quoted in the generated SQL.
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from csv_shuffle.db import get_connection, table_exists
from csv_shuffle.reader.csv_reader import CSVReader
from csv_shuffle.reader.stats import ColumnStats, DataType, calc_stats

logger = logging.getLogger(__name__)

INSERT_BATCH_SIZE = 1000

SQLITE_TYPES: dict[DataType, str] = {
    DataType.STRING:  "TEXT",
    DataType.NULL:    "TEXT",
    DataType.INTEGER: "INTEGER",
    DataType.FLOAT:   "REAL",
}

_DROPPED_CHARS = str.maketrans("", "", "-\\,.")
_UNDERSCORED_CHARS = str.maketrans({"/": "_", " ": "_"})


# ── Names ─────────────────────────────────────────────────────────────────────


def sql_sanitize(name: str) -> str:
    """Make ``name`` a tidy SQL identifier.

    - Drops ``- \\ , .``
    - Replaces spaces and ``/`` with ``_``
    - Prefixes ``_`` when the name starts with a digit
    - Lower-cases the result

    An empty result becomes ``"column"``.
    """
    cleaned = name.translate(_DROPPED_CHARS).translate(_UNDERSCORED_CHARS).lower()
    if not cleaned:
        return "column"
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


def sanitize_columns(col_names: Sequence[str]) -> list[str]:
    """Sanitise every name, suffixing ``_2``, ``_3`` … to keep them unique."""
    seen: dict[str, int] = {}
    result: list[str] = []
    for name in col_names:
        base = sql_sanitize(name)
        candidate = base
        while candidate in seen:
            seen[base] += 1
            candidate = f"{base}_{seen[base]}"
        seen.setdefault(candidate, 1)
        result.append(candidate)
    return result


def default_table_name(csv_file: Union[str, Path]) -> str:
    """``path/to/my data.v2.csv`` → ``my_data``."""
    return sql_sanitize(Path(csv_file).name.split(".")[0])


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


# ── SQL generation ────────────────────────────────────────────────────────────


def sqlite_types(stats: Sequence[ColumnStats]) -> list[str]:
    """SQLite column type for each column's preferred ``DataType``."""
    return [SQLITE_TYPES[s.preferred_type()] for s in stats]


def create_table_sql(table: str, col_names: Sequence[str], col_types: Sequence[str]) -> str:
    """Generate a ``CREATE TABLE`` statement."""
    columns = ", ".join(f"{_quote(n)} {t}" for n, t in zip(col_names, col_types))
    return f"CREATE TABLE {_quote(table)} ({columns});"


def insert_sql(table: str, n_cols: int) -> str:
    """Generate an ``INSERT`` statement with ``n_cols`` positional placeholders."""
    placeholders = ", ".join("?" for _ in range(n_cols))
    return f"INSERT INTO {_quote(table)} VALUES ({placeholders});"


def convert_value(value: str, sql_type: str) -> Any:
    """Convert one CSV field for insertion into a column of ``sql_type``.

    Empty fields become ``None``; fields that do not parse as the column's
    numeric type are stored as text.
    """
    if not value.strip():
        return None
    try:
        if sql_type == "INTEGER":
            return int(value)
        if sql_type == "REAL":
            return float(value)
    except ValueError:
        return value
    return value


def _converted(
    rows: Iterable[Sequence[str]],
    col_types: Sequence[str],
) -> Iterator[list[Any]]:
    n_cols = len(col_types)
    for row in rows:
        padded = list(row) + [""] * (n_cols - len(row))
        yield [convert_value(v, t) for v, t in zip(padded, col_types)]


# ── Export ────────────────────────────────────────────────────────────────────


def csv_to_sql(
    csv_file: Union[str, Path],
    db_path: Union[str, Path],
    table: Optional[str] = None,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """Load ``csv_file`` into a new table of the SQLite database ``db_path``.

    Args:
        csv_file:  Input CSV.
        db_path:   Database file (created if missing).
        table:     Table name (default: the file name without extensions).
        delimiter: Field delimiter (guessed when None).
        encoding:  Input encoding.

    Returns:
        Number of rows inserted.

    Raises:
        ValueError: If the table already exists.
    """
    table = sql_sanitize(table) if table else default_table_name(csv_file)

    with CSVReader(csv_file, delimiter=delimiter, encoding=encoding) as reader:
        col_names = sanitize_columns(reader.col_names)
        col_types = sqlite_types(calc_stats(reader, reader.col_names))
        delimiter = reader.delimiter

    inserted = 0
    with get_connection(db_path) as conn:
        if table_exists(conn, table):
            raise ValueError(f"Table {table!r} already exists in {db_path}.")
        conn.execute(create_table_sql(table, col_names, col_types))

        stmt = insert_sql(table, len(col_names))
        with CSVReader(csv_file, delimiter=delimiter, encoding=encoding) as reader:
            rows = _converted(reader, col_types)
            while batch := list(itertools.islice(rows, INSERT_BATCH_SIZE)):
                conn.executemany(stmt, batch)
                inserted += len(batch)

    logger.info("Inserted %d row(s) into %s.%s", inserted, db_path, table)
    return inserted
