"""
csv_shuffle.export — Converters from CSV to other formats.

All converters read the input lazily with ``CSVReader`` and return the
number of rows written.

Modules:
  ndjson  — Newline-delimited JSON, one object per row.
  sqlite  — SQLite table with inferred column types.
  parquet — Parquet file with inferred Arrow types.
"""
