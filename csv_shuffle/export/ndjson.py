"""
CSV → newline-delimited JSON.

One JSON object per data row, keyed by the header names::

    {"id": "1", "name": "Short"}
    {"id": "2", "name": "Ok"}

Values stay strings (CSV has no types); a short row's missing columns are
written as ``null``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from csv_shuffle.reader.csv_reader import CSVReader

logger = logging.getLogger(__name__)


def default_json_path(csv_file: Union[str, Path]) -> Path:
    """``data.csv`` → ``data.csv.ndjson`` next to the input."""
    csv_file = Path(csv_file)
    return csv_file.with_name(csv_file.name + ".ndjson")


def csv_to_json(
    csv_file: Union[str, Path],
    out_path: Optional[Path] = None,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """Write every data row of ``csv_file`` to ``out_path`` as NDJSON.

    Args:
        csv_file:  Input CSV.
        out_path:  Output file (default: :func:`default_json_path`).  Parent
                   directories are created if missing.
        delimiter: Field delimiter (guessed when None).
        encoding:  Input encoding.

    Returns:
        Number of rows written.
    """
    out_path = Path(out_path) if out_path is not None else default_json_path(csv_file)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with CSVReader(csv_file, delimiter=delimiter, encoding=encoding) as reader, \
            out_path.open("w", encoding="utf-8") as out:
        names = reader.col_names
        for row in reader:
            record = {name: (row[i] if i < len(row) else None) for i, name in enumerate(names)}
            out.write(json.dumps(record, ensure_ascii=False))
            out.write("\n")
            written += 1

    logger.info("Wrote %d row(s) to %s", written, out_path)
    return written
