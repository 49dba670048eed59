"""
Regular-expression search over one CSV column.

``grep_rows()`` filters a row stream lazily, so a search over a large file can
be paged through with :class:`~csv_shuffle.printing.pager.Pager` and stopped
early without reading the rest of the file.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str, ignore_case: bool = False) -> re.Pattern[str]:
    """Compile ``pattern``, turning ``re.error`` into ``ValueError``."""
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ValueError(f"Invalid regular expression {pattern!r}: {exc}") from exc


def grep_rows(
    rows: Iterable[Sequence[str]],
    column: int,
    pattern: str,
    ignore_case: bool = False,
) -> Iterator[Sequence[str]]:
    """Return an iterator over the rows whose ``column`` field matches ``pattern``.

    Matching uses ``re.search`` (anywhere in the field).  Rows too short to
    have ``column`` never match.  The pattern is compiled eagerly so a bad
    expression fails before any row is read.

    Raises:
        ValueError: If ``pattern`` is not a valid regular expression.
    """
    return _matching(rows, column, compile_pattern(pattern, ignore_case))


def _matching(
    rows: Iterable[Sequence[str]],
    column: int,
    regex: re.Pattern[str],
) -> Iterator[Sequence[str]]:
    scanned = matched = 0
    for row in rows:
        scanned += 1
        if column < len(row) and regex.search(row[column]):
            matched += 1
            yield row
    logger.debug("grep: %d of %d row(s) matched %r", matched, scanned, regex.pattern)
