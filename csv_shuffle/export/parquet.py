"""
CSV → Parquet.

Column types are inferred the same way as for the SQLite export (most common
non-null parse wins) and mapped to Arrow types:

  string  → ``pa.string()``
  integer → ``pa.int64()``
  float   → ``pa.float64()``

All columns are nullable: empty fields, and fields that do not parse as the
column's numeric type, are written as nulls.

Rows are written in record batches of ``BATCH_SIZE`` rows through a single
``pq.ParquetWriter`` so memory use stays flat for large inputs.
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import pyarrow as pa
import pyarrow.parquet as pq

from csv_shuffle.reader.csv_reader import CSVReader
from csv_shuffle.reader.stats import DataType, calc_stats

logger = logging.getLogger(__name__)

BATCH_SIZE = 10_000

_PA_TYPE_MAP: dict[DataType, pa.DataType] = {
    DataType.STRING:  pa.string(),
    DataType.NULL:    pa.string(),
    DataType.INTEGER: pa.int64(),
    DataType.FLOAT:   pa.float64(),
}


def default_parquet_path(csv_file: Union[str, Path]) -> Path:
    """``data.csv`` → ``data.parquet`` next to the input."""
    return Path(csv_file).with_suffix(".parquet")


def build_schema(col_names: Sequence[str], dtypes: Sequence[DataType]) -> pa.Schema:
    """Arrow schema with one nullable field per CSV column."""
    return pa.schema([
        pa.field(name, _PA_TYPE_MAP[dtype], nullable=True)
        for name, dtype in zip(col_names, dtypes)
    ])


def _parse(value: str, pa_type: pa.DataType) -> Any:
    if not value.strip():
        return None
    if pa_type == pa.string():
        return value
    try:
        return int(value) if pa_type == pa.int64() else float(value)
    except ValueError:
        return None


def _to_batch(rows: list[list[str]], schema: pa.Schema) -> pa.RecordBatch:
    arrays: list[pa.Array] = []
    for i, pa_field in enumerate(schema):
        values = [_parse(row[i] if i < len(row) else "", pa_field.type) for row in rows]
        arrays.append(pa.array(values, type=pa_field.type))
    return pa.RecordBatch.from_arrays(arrays, schema=schema)


def csv_to_parquet(
    csv_file: Union[str, Path],
    out_path: Optional[Path] = None,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """Convert ``csv_file`` to a Parquet file.

    Args:
        csv_file:  Input CSV.
        out_path:  Output file (default: :func:`default_parquet_path`).
        delimiter: Field delimiter (guessed when None).
        encoding:  Input encoding.

    Returns:
        Number of rows written.
    """
    out_path = Path(out_path) if out_path is not None else default_parquet_path(csv_file)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with CSVReader(csv_file, delimiter=delimiter, encoding=encoding) as reader:
        col_names = list(reader.col_names)
        dtypes = [s.preferred_type() for s in calc_stats(reader, col_names)]
        delimiter = reader.delimiter

    schema = build_schema(col_names, dtypes)
    written = 0
    with CSVReader(csv_file, delimiter=delimiter, encoding=encoding) as reader, \
            pq.ParquetWriter(out_path, schema) as writer:
        rows = iter(reader)
        while batch := list(itertools.islice(rows, BATCH_SIZE)):
            writer.write_batch(_to_batch(batch, schema))
            written += len(batch)

    logger.info("Wrote %d row(s) to %s", written, out_path)
    return written
