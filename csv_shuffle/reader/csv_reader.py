"""
Lazy CSV row source.

``CSVReader`` opens a delimited text file, reads the header row, and then
yields data rows one at a time. Nothing beyond the current row is held in
memory, so arbitrarily large files can be paged through.

Delimiter
---------
When no delimiter is given the first ``sniff_bytes`` of the file are passed to
:class:`csv.Sniffer` restricted to ``, ; | TAB``.  If sniffing fails the file
is read as comma-separated.

Malformed rows
--------------
- Blank lines are skipped.
- Rows with MORE fields than the header are skipped with a warning and
  counted in ``bad_rows`` (they cannot be aligned under the header).
- Rows with fewer fields are passed through unchanged; the printer renders the
  missing cells blank.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, Optional, Union

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",;|\t"
DEFAULT_SNIFF_BYTES = 64 * 1024

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CSVFileInfo:
    """Basic facts about a CSV file.

    Attributes:
        filename:  Path as given.
        delimiter: Delimiter used (given or guessed).
        n_rows:    Number of well-formed data rows (header excluded).
        n_cols:    Number of header columns.
        col_names: Header row.
        bad_rows:  Rows skipped for having more fields than the header.
    """

    filename: str
    delimiter: str
    n_rows: int
    n_cols: int
    col_names: list[str] = field(default_factory=list)
    bad_rows: int = 0


def guess_delimiter(sample: str) -> str:
    """Guess the delimiter of ``sample`` (defaults to a comma)."""
    if not sample:
        return ","
    try:
        return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return ","


class CSVReader:
    """Iterate over the data rows of a CSV file.

    Usage::

        with CSVReader("data.csv") as reader:
            print(reader.col_names)
            for row in reader:
                ...

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file has no header row.
    """

    def __init__(
        self,
        path: PathLike,
        delimiter: Optional[str] = None,
        encoding: str = "utf-8",
        sniff_bytes: int = DEFAULT_SNIFF_BYTES,
    ) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.path}")

        self._file: IO[str] = open(self.path, encoding=encoding, newline="")
        try:
            if delimiter is None:
                delimiter = guess_delimiter(self._file.read(sniff_bytes))
                self._file.seek(0)
            self.delimiter = delimiter

            self._reader = csv.reader(self._file, delimiter=delimiter)
            header = next((row for row in self._reader if row), None)
            if header is None:
                raise ValueError(f"CSV file is empty or has no header row: {self.path}")
        except BaseException:
            self._file.close()
            raise

        self.col_names: list[str] = header
        self.n_rows = 0
        self.bad_rows = 0

    def __iter__(self) -> Iterator[list[str]]:
        n_cols = len(self.col_names)
        for row in self._reader:
            if not row:
                continue
            if len(row) > n_cols:
                self.bad_rows += 1
                logger.warning(
                    "%s line %d: %d fields, expected at most %d; row skipped",
                    self.path.name, self._reader.line_num, len(row), n_cols,
                )
                continue
            self.n_rows += 1
            yield row

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "CSVReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ── Convenience helpers ───────────────────────────────────────────────────────


def read_rows(
    path: PathLike,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> Iterator[list[str]]:
    """Yield the data rows of ``path`` lazily (header excluded)."""
    with CSVReader(path, delimiter=delimiter, encoding=encoding) as reader:
        yield from reader


def get_col_names(
    path: PathLike,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> list[str]:
    """Return the header row of ``path``."""
    with CSVReader(path, delimiter=delimiter, encoding=encoding) as reader:
        return list(reader.col_names)


def resolve_column(col_names: list[str], column: Union[str, int]) -> int:
    """Return the index of ``column``, given either by name or by position.

    Names take precedence, so a column literally called ``"2"`` is found by
    name before ``"2"`` is tried as a position.

    Raises:
        ValueError: If no such column exists.
    """
    if isinstance(column, str):
        if column in col_names:
            return col_names.index(column)
        if not column.lstrip("-").isdigit():
            raise ValueError(
                f"Could not find a column named {column!r}. "
                f"Available columns: {col_names}"
            )
        column = int(column)

    if not 0 <= column < len(col_names):
        raise ValueError(
            f"Column index {column} out of range: the file only has "
            f"{len(col_names)} columns."
        )
    return column


def get_col_pos(
    path: PathLike,
    column: Union[str, int],
    delimiter: Optional[str] = None,
) -> int:
    """Return the index of ``column`` (name or position) in ``path``."""
    return resolve_column(get_col_names(path, delimiter=delimiter), column)


def get_file_info(
    path: PathLike,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> CSVFileInfo:
    """Scan ``path`` once and summarise its shape."""
    with CSVReader(path, delimiter=delimiter, encoding=encoding) as reader:
        for _ in reader:
            pass
        return CSVFileInfo(
            filename=str(path),
            delimiter=reader.delimiter,
            n_rows=reader.n_rows,
            n_cols=len(reader.col_names),
            col_names=list(reader.col_names),
            bad_rows=reader.bad_rows,
        )
