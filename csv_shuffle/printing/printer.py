"""
Paginated, column-aligned table printer.

``PrettyPrinter`` buffers rows of text fields and turns them into pages of
aligned text, one page per ``format()`` call::

    printer = PrettyPrinter(PrinterParams(col_names=["id", "name"], row_numbers=True))
    printer.feed(["1", "Short"]).feed([["2", "Longer name"], ["3", "Ok"]])
    while printer.format():
        for line in printer.flush():
            print(line)

Page layout
-----------
::

              id      name
              ================
    [0]       1       Short
    [1]       2       A very long name
                        exceeding it
    [2]       3       Ok

- Widths are re-measured for every page over the header plus every row still
  buffered (see :func:`~csv_shuffle.printing.widths.calc_widths`).
- A page holds ``page_row_budget(widths)`` logical rows; the header and its
  divider do not count against that budget.
- A field longer than its column is reflowed; the wrapped lines are emitted as
  extra passes over the same logical row before the next row starts.  Cells
  with nothing left to show render blank.
- With ``page_width`` set, columns that do not fit are printed as further
  column blocks over the same rows, separated by a blank line.

Labels
------
At most one label style is active: explicit ``row_names`` (positional,
blank once exhausted), ``[n]`` numbering starting at ``start_row``, or none.
Header, divider and continuation lines carry a blank label.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from csv_shuffle.printing.reflow import DEFAULT_INDENT, str_break
from csv_shuffle.printing.text import digits, rep, rpad_trim
from csv_shuffle.printing.widths import (
    DEFAULT_MAX_COL_WIDTH,
    DEFAULT_PADDING,
    calc_widths,
    page_row_budget,
)

if TYPE_CHECKING:
    from typing import TextIO

    from csv_shuffle.printing.pager import KeyReader

logger = logging.getLogger(__name__)

Row = Sequence[str]

# Control characters that would break a cell across terminal lines.
_CELL_WHITESPACE = str.maketrans({"\n": " ", "\r": " ", "\t": " ", "\v": " ", "\f": " "})


# ── Configuration ─────────────────────────────────────────────────────────────


class PrinterParams(BaseModel):
    """Display options for :class:`PrettyPrinter`.

    ``row_names`` wins over ``row_numbers`` when both are given.
    """

    model_config = ConfigDict(frozen=True)

    col_names: list[str] = []
    row_names: list[str] = []
    row_numbers: bool = False
    start_row: int = 0
    padding: int = DEFAULT_PADDING
    border: str = "="
    max_col_width: int = DEFAULT_MAX_COL_WIDTH
    indent: int = DEFAULT_INDENT
    page_width: Optional[int] = None

    @field_validator("start_row", "padding", "indent")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must be >= 0, got {v}.")
        return v

    @field_validator("border")
    @classmethod
    def validate_border(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"border must be a single character, got {v!r}.")
        return v

    @field_validator("page_width")
    @classmethod
    def validate_page_width(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"page_width must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_max_col_width(self) -> "PrinterParams":
        if self.max_col_width < max(self.padding, 1):
            raise ValueError(
                f"max_col_width ({self.max_col_width}) must be >= padding "
                f"({self.padding}) and >= 1."
            )
        return self


# ── Row rendering ─────────────────────────────────────────────────────────────


def render_row(
    fields: Row,
    col_widths: Sequence[int],
    columns: Optional[Iterable[int]] = None,
    padding: int = DEFAULT_PADDING,
    indent: int = DEFAULT_INDENT,
) -> list[str]:
    """Render one logical row as one or more physical lines.

    Each column keeps ``padding`` spaces free at its right edge: content is
    limited to ``width - padding`` characters (the full width for columns no
    wider than the padding).  Longer fields are broken with :func:`str_break`
    to that content width.  The first piece is shown on the first line; the
    rest wait in a per-column continuation queue that is drained one line per
    pass.  Unbreakable runs are cut at the content width.  Missing trailing
    fields render blank.

    Args:
        fields:     The row's fields.
        col_widths: Width of every column in the table.
        columns:    Column indices to render (default: all).
        padding:    Gap kept free at the right of each column when wrapping.
        indent:     Indentation of continuation lines.

    Returns:
        Physical lines, each exactly ``sum(col_widths[c] for c in columns)``
        characters wide.
    """
    cols = list(range(len(col_widths)) if columns is None else columns)
    continuations: dict[int, deque[str]] = {}
    cells: list[str] = []

    content = [_content_width(col_widths[col], padding) for col in cols]

    for col, limit in zip(cols, content):
        width = col_widths[col]
        field = fields[col] if col < len(fields) else ""
        if len(field) > limit:
            pieces = str_break(field, limit, indent)
            cells.append(rpad_trim(pieces[0], width, limit))
            if len(pieces) > 1:
                continuations[col] = deque(pieces[1:])
        else:
            cells.append(rpad_trim(field, width))

    lines = ["".join(cells)]
    while any(continuations.values()):
        cells = []
        for col, limit in zip(cols, content):
            pending = continuations.get(col)
            cells.append(rpad_trim(pending.popleft() if pending else "", col_widths[col], limit))
        lines.append("".join(cells))

    return lines


def _content_width(width: int, padding: int) -> int:
    return width - padding if width > padding else width


def long_table(
    rows: Iterable[Row],
    col_widths: Sequence[int],
    padding: int = 2,
    indent: int = DEFAULT_INDENT,
) -> list[str]:
    """Render ``rows`` with fixed column widths, wrapping long fields.

    Used for listings where the caller already knows how wide each column
    should be (e.g. the two-column ``info`` report).
    """
    lines: list[str] = []
    for row in rows:
        lines.extend(render_row(_clean_row(row), col_widths, padding=padding, indent=indent))
    return lines


def _clean_row(row: Iterable[Any]) -> list[str]:
    """Copy ``row`` as strings with line-breaking whitespace flattened."""
    return ["" if f is None else str(f).translate(_CELL_WHITESPACE) for f in row]


def _is_single_row(items: list[Any]) -> bool:
    first = items[0]
    return isinstance(first, str) or not isinstance(first, Iterable)


# ── Printer ───────────────────────────────────────────────────────────────────


class PrettyPrinter:
    """Buffer rows and format them into aligned pages.

    Rows live in a single list with a head cursor; ``format()`` advances the
    cursor past the rows it rendered and compacts the list afterwards.

    Attributes:
        params:    Display options.
        formatted: Lines produced by ``format()`` and not yet flushed.
        pages:     Number of pages formatted so far.
    """

    def __init__(self, params: Optional[PrinterParams] = None, **options: Any) -> None:
        if options:
            base = params.model_dump() if params is not None else {}
            params = PrinterParams(**{**base, **options})
        self.params: PrinterParams = params or PrinterParams()
        self.formatted: list[str] = []
        self.pages = 0

        self._rows: list[list[str]] = []
        self._head = 0
        self._row_num = self.params.start_row
        self._row_name_pos = 0
        self._col_names = _clean_row(self.params.col_names)

    # ── Input ────────────────────────────────────────────────────────────────

    def feed(self, data: Iterable[Any]) -> "PrettyPrinter":
        """Append one row, or every row of an iterable of rows.

        A sequence whose first element is a string is a single row; anything
        else is treated as a batch.  An empty sequence feeds nothing.

        Returns:
            ``self``, so calls can be chained.
        """
        if isinstance(data, (str, bytes)):
            raise TypeError("feed() expects a row or an iterable of rows, not a string.")

        items = list(data)
        if not items:
            return self

        if _is_single_row(items):
            self._rows.append(_clean_row(items))
        else:
            self._rows.extend(_clean_row(row) for row in items)
        return self

    @property
    def pending(self) -> int:
        """Number of buffered rows not yet formatted."""
        return len(self._rows) - self._head

    @property
    def row_num(self) -> int:
        """Row number the next page starts from."""
        return self._row_num

    def __len__(self) -> int:
        return self.pending

    # ── Formatting ───────────────────────────────────────────────────────────

    def format(self) -> bool:
        """Format one page from the buffered rows into ``formatted``.

        Returns:
            True if ``formatted`` holds any lines afterwards.

        Raises:
            RaggedRowError: If a buffered row has more fields than the header
                (or, without a header, the first buffered row).
        """
        if self.pending == 0:
            return bool(self.formatted)

        params = self.params
        remaining = self._rows[self._head:]
        header = [self._col_names] if self._col_names else []
        col_widths = calc_widths(header + remaining, params.max_col_width, params.padding)

        page = remaining[:page_row_budget(col_widths)]
        first_row = self._row_num

        if col_widths:
            label_width = self._label_width(first_row, len(page))
            for n, (lo, hi) in enumerate(self._column_blocks(col_widths)):
                if n > 0:
                    self.formatted.append("")
                self._emit_block(page, col_widths, range(lo, hi), first_row, label_width)
            self.pages += 1
        else:
            logger.debug("Skipping %d row(s) with no fields.", len(page))

        self._consume(len(page))
        self._row_num = first_row + len(page)
        self._row_name_pos += len(page)

        logger.debug(
            "Formatted page %d: %d row(s), %d column(s), %d row(s) pending",
            self.pages, len(page), len(col_widths), self.pending,
        )
        return bool(self.formatted)

    def flush(self) -> list[str]:
        """Return and clear the formatted lines."""
        lines, self.formatted = self.formatted, []
        return lines

    def print_pages(
        self,
        out: Optional["TextIO"] = None,
        read_key: Optional["KeyReader"] = None,
    ) -> bool:
        """Print every buffered row page by page, pausing between pages.

        Returns:
            True if all rows were printed, False if the user quit early.
        """
        from csv_shuffle.printing.pager import Pager, PagerResult

        return Pager(self, out=out, read_key=read_key).run() is PagerResult.EXHAUSTED

    # ── Internals ────────────────────────────────────────────────────────────

    def _consume(self, n: int) -> None:
        self._head += n
        if self._head:
            del self._rows[:self._head]
            self._head = 0

    def _label_width(self, first_row: int, n_rows: int) -> int:
        params = self.params
        if params.row_names:
            return max(len(name) for name in params.row_names) + params.padding
        if params.row_numbers:
            return digits(first_row + n_rows) + 2 + params.padding
        return 0

    def _label(self, index: int, row_num: int, width: int) -> str:
        """Label for the ``index``-th logical row of the current page."""
        params = self.params
        if params.row_names:
            pos = self._row_name_pos + index
            name = params.row_names[pos] if pos < len(params.row_names) else ""
            return rpad_trim(name, width)
        if params.row_numbers:
            return rpad_trim(f"[{row_num}]", width)
        return ""

    def _column_blocks(self, col_widths: Sequence[int]) -> list[tuple[int, int]]:
        """Split columns into ``(start, stop)`` blocks that fit ``page_width``."""
        page_width = self.params.page_width
        if page_width is None:
            return [(0, len(col_widths))]

        blocks: list[tuple[int, int]] = []
        lo, running = 0, 0
        for i, width in enumerate(col_widths):
            if i > lo and running >= page_width:
                blocks.append((lo, i))
                lo, running = i, 0
            running += width
        blocks.append((lo, len(col_widths)))
        return blocks

    def _emit_block(
        self,
        page: list[list[str]],
        col_widths: Sequence[int],
        columns: range,
        first_row: int,
        label_width: int,
    ) -> None:
        params = self.params
        blank = rep(" ", label_width)

        def emit(fields: Row, label: str) -> None:
            lines = render_row(fields, col_widths, columns, params.padding, params.indent)
            self.formatted.append(label + lines[0])
            self.formatted.extend(blank + line for line in lines[1:])

        if self._col_names:
            emit(self._col_names, blank)
            self.formatted.append(blank + "".join(rep(params.border, col_widths[c]) for c in columns))

        for index, row in enumerate(page):
            emit(row, self._label(index, first_row + index, label_width))
