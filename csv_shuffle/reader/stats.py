"""
Streaming per-column statistics for CSV data.

For every column ``calc_stats()`` tracks, in one pass over the rows:

- Mean and sample variance of the numeric fields (Welford's algorithm, so
  no values are stored).
- Minimum and maximum numeric value.
- Frequency of every distinct value (for "top N most common" reports).
- How many fields parsed as each ``DataType``.

Non-numeric fields are ignored by the numeric statistics; a column without any
numeric field reports ``None`` for mean, variance, min and max.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence


class DataType(str, Enum):
    """Type a single CSV field parses as."""

    NULL = "null"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"


def classify(value: str) -> DataType:
    """Return the most specific ``DataType`` ``value`` parses as."""
    text = value.strip()
    if not text:
        return DataType.NULL
    try:
        int(text)
        return DataType.INTEGER
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return DataType.STRING
    if math.isnan(number) or math.isinf(number):
        return DataType.STRING
    return DataType.FLOAT


@dataclass
class ColumnStats:
    """Running statistics for one column.

    Attributes:
        name:     Column name.
        n:        Number of numeric fields seen.
        mean:     Running mean of numeric fields.
        min:      Smallest numeric value (None until one is seen).
        max:      Largest numeric value (None until one is seen).
        counts:   Frequency of every distinct raw value.
        dtypes:   Number of fields per ``DataType``.
    """

    name: str
    n: int = 0
    mean: float = 0.0
    min: Optional[float] = None
    max: Optional[float] = None
    counts: Counter = field(default_factory=Counter)
    dtypes: Counter = field(default_factory=Counter)
    _m2: float = 0.0

    def add(self, value: str) -> None:
        """Fold one raw field into the statistics."""
        self.counts[value] += 1
        dtype = classify(value)
        self.dtypes[dtype] += 1
        if dtype not in (DataType.INTEGER, DataType.FLOAT):
            return

        x = float(value)
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        self._m2 += delta * (x - self.mean)
        self.min = x if self.min is None else min(self.min, x)
        self.max = x if self.max is None else max(self.max, x)

    @property
    def mean_value(self) -> Optional[float]:
        return self.mean if self.n else None

    @property
    def variance(self) -> Optional[float]:
        """Sample variance (n - 1 denominator); None with fewer than 2 values."""
        if self.n < 2:
            return None
        return self._m2 / (self.n - 1)

    def top_values(self, n: int = 10) -> list[tuple[str, int]]:
        """Return the ``n`` most common values with their counts."""
        return self.counts.most_common(n)

    def preferred_type(self) -> DataType:
        """Most common non-null type; integers count toward floats when mixed.

        A column holding both integers and floats is a float column.  Columns
        without any non-null field are strings.
        """
        non_null = {t: c for t, c in self.dtypes.items() if t is not DataType.NULL}
        if not non_null:
            return DataType.STRING
        if DataType.STRING in non_null and non_null[DataType.STRING] >= (
            non_null.get(DataType.INTEGER, 0) + non_null.get(DataType.FLOAT, 0)
        ):
            return DataType.STRING
        if DataType.FLOAT in non_null:
            return DataType.FLOAT
        if DataType.INTEGER in non_null:
            return DataType.INTEGER
        return DataType.STRING


def calc_stats(
    rows: Iterable[Sequence[str]],
    col_names: Sequence[str],
) -> list[ColumnStats]:
    """Compute ``ColumnStats`` for every column of ``rows`` in one pass.

    Fields beyond ``len(col_names)`` are ignored; short rows only update the
    columns they have.
    """
    stats = [ColumnStats(name=name) for name in col_names]
    for row in rows:
        for col_stats, value in zip(stats, row):
            col_stats.add(value)
    return stats
