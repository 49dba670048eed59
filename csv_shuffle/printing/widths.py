"""
Column width estimation and the per-page row budget.

Width rule
----------
For every column::

    width = max over rows of min(len(field) + padding, max_col_width)

The first row measured (the header, when the caller prepends one) fixes the
column count.  Shorter rows simply do not contribute to the columns they lack.
Longer rows are malformed and raise :class:`RaggedRowError` instead of being
silently cropped.

Row budget
----------
Wide tables print fewer logical rows per page so the character volume of a
page stays roughly constant::

    page_rows = min(50, floor(50 / (total_width / 100)))

clamped to at least one row.
"""

from __future__ import annotations

from typing import Sequence

DEFAULT_MAX_COL_WIDTH = 100
DEFAULT_PADDING = 4
MAX_PAGE_ROWS = 50


class RaggedRowError(ValueError):
    """Raised when a row has more fields than the first row measured.

    Attributes:
        row_index: Position of the offending row in the measured batch.
        expected:  Column count fixed by the first row.
        found:     Field count of the offending row.
    """

    def __init__(self, row_index: int, expected: int, found: int) -> None:
        self.row_index = row_index
        self.expected  = expected
        self.found     = found
        super().__init__(
            f"Row {row_index} has {found} fields but the table has {expected} columns."
        )


def calc_widths(
    rows: Sequence[Sequence[str]],
    max_col_width: int = DEFAULT_MAX_COL_WIDTH,
    padding: int = DEFAULT_PADDING,
) -> list[int]:
    """Compute the display width of each column in ``rows``.

    Args:
        rows:          Batch to measure; prepend the header row if there is one.
        max_col_width: Upper bound for any single column.
        padding:       Spaces added after the longest field of each column.

    Returns:
        One width per column (empty list for an empty batch).

    Raises:
        RaggedRowError: If a row has more fields than the first row.
    """
    widths: list[int] = []

    for i, row in enumerate(rows):
        if i == 0:
            widths = [min(len(field) + padding, max_col_width) for field in row]
            continue

        if len(row) > len(widths):
            raise RaggedRowError(i, len(widths), len(row))

        for col, field in enumerate(row):
            width = min(len(field) + padding, max_col_width)
            if width > widths[col]:
                widths[col] = width

    return widths


def page_row_budget(col_widths: Sequence[int], max_rows: int = MAX_PAGE_ROWS) -> int:
    """Return how many logical rows fit on one page for ``col_widths``.

    ``min(max_rows, floor(max_rows / (total / 100)))``, never less than one.
    """
    total = sum(col_widths)
    if total <= 0:
        return max_rows
    return max(1, min(max_rows, (max_rows * 100) // total))
