"""
Word-aware line breaking for fields wider than their column.

``str_break()`` splits one field into the physical lines needed to show it
inside a column::

    >>> str_break("A very long name exceeding the column width", 20)
    ['A very long name', '  exceeding the', '  column width']

Rules
-----
- Break on the last whitespace seen since the current line started.
- Never split a word: a run of non-whitespace longer than the budget becomes
  its own (overlong) line.
- The whitespace a line was broken on starts the next line; continuation lines
  are then indented to ``indent`` spaces, counting that whitespace.
- Continuation lines get ``width - indent`` characters of budget so that the
  indented line still fits in ``width``.
- Empty input gives one empty line.
"""

from __future__ import annotations

from csv_shuffle.printing.text import indent as indent_line

DEFAULT_INDENT = 2


def str_break(text: str, width: int, indent: int = DEFAULT_INDENT) -> list[str]:
    """Break ``text`` into lines of at most ``width`` characters.

    Args:
        text:   Field content.
        width:  Target column content width (>= 1).
        indent: Leading spaces on every line after the first.

    Returns:
        Non-empty list of lines.  Removing the inserted indentation and
        joining the lines gives back ``text``.
    """
    if not text:
        return [""]

    width = max(width, 1)
    lines: list[str] = []
    start = 0
    last_space = -1

    for i, ch in enumerate(text):
        if ch.isspace() and i > start:
            last_space = i

        budget = width if not lines else max(width - indent, 1)
        if i - start >= budget and last_space > start:
            lines.append(text[start:last_space])
            start = last_space
            last_space = -1

    lines.append(text[start:])
    return [lines[0]] + [indent_line(line, indent) for line in lines[1:]]
