"""
Stateless string helpers shared by the printer, the reflow engine and the CLI.

Widths are measured with ``len()``: one character is one display unit.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional


def rpad_trim(text: str, width: int, trim: Optional[int] = None) -> str:
    """Left-align ``text`` in a cell of ``width`` characters.

    Text longer than ``trim`` (default: ``width``) is cut to ``trim``
    characters and then padded, so a cell never pushes the next column out
    of line.

    Args:
        text:  Cell content.
        width: Target cell width.
        trim:  Maximum characters kept from ``text``.

    Returns:
        A string of exactly ``width`` characters.
    """
    limit = width if trim is None else min(trim, width)
    return text[:limit].ljust(width)


def indent(text: str, spaces: int = 2) -> str:
    """Indent ``text`` to ``spaces`` leading spaces.

    Leading spaces already present count toward the indent, so a line that
    starts with the whitespace it was broken on is not pushed further right.
    """
    existing = len(text) - len(text.lstrip(" "))
    if spaces > existing:
        return " " * (spaces - existing) + text
    return text


def rep(text: str, n: int) -> str:
    """Repeat ``text`` ``n`` times (empty string for ``n <= 0``)."""
    return text * max(n, 0)


def digits(num: int) -> int:
    """Return the number of decimal digits in ``num``."""
    return len(str(abs(int(num))))


def round_value(value: Optional[float]) -> str:
    """Format a number to two decimal places; NaN and None become ``""``."""
    if value is None:
        return ""
    try:
        if math.isnan(value):
            return ""
    except TypeError:
        return str(value)
    return f"{value:.2f}"


def round_values(values: Iterable[Optional[float]]) -> list[str]:
    """Apply :func:`round_value` to every element of ``values``."""
    return [round_value(v) for v in values]
