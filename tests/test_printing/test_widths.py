"""Tests for column width estimation and the page row budget."""

from __future__ import annotations

import pytest

from csv_shuffle.printing.widths import (
    MAX_PAGE_ROWS,
    RaggedRowError,
    calc_widths,
    page_row_budget,
)


class TestCalcWidths:
    def test_longest_field_plus_padding(self) -> None:
        rows = [["id", "name"], ["1", "Short"], ["22", "Ok"]]
        assert calc_widths(rows, max_col_width=100, padding=4) == [6, 9]

    def test_clamped_to_max(self) -> None:
        rows = [["x" * 500]]
        assert calc_widths(rows, max_col_width=40, padding=4) == [40]

    def test_every_width_at_least_padding(self) -> None:
        rows = [["", "", ""]]
        assert calc_widths(rows, padding=3) == [3, 3, 3]

    def test_empty_batch(self) -> None:
        assert calc_widths([]) == []

    def test_short_rows_skip_missing_columns(self) -> None:
        rows = [["a", "b", "c"], ["longer"]]
        assert calc_widths(rows, padding=1) == [7, 2, 2]

    def test_long_row_fails_fast(self) -> None:
        rows = [["a", "b"], ["1", "2"], ["1", "2", "3"]]
        with pytest.raises(RaggedRowError) as exc_info:
            calc_widths(rows)
        err = exc_info.value
        assert (err.row_index, err.expected, err.found) == (2, 2, 3)
        assert isinstance(err, ValueError)

    def test_depends_only_on_batch(self) -> None:
        """Measuring the same batch twice gives the same widths."""
        rows = [["abc", "de"], ["f", "ghijk"]]
        assert calc_widths(rows) == calc_widths(list(rows))


class TestPageRowBudget:
    @pytest.mark.parametrize(
        "widths, expected",
        [
            ([10, 10], 50),        # 5000 // 20 = 250 → capped
            ([100], 50),           # exactly 50
            ([100, 100], 25),
            ([150, 150], 16),      # floor(50 / 3)
            ([3000, 3000], 1),     # 5000 // 6000 = 0 → clamped
        ],
    )
    def test_formula(self, widths: list[int], expected: int) -> None:
        assert page_row_budget(widths) == expected

    def test_zero_width_uses_max(self) -> None:
        assert page_row_budget([]) == MAX_PAGE_ROWS
        assert page_row_budget([0, 0]) == MAX_PAGE_ROWS

    def test_never_zero(self) -> None:
        for total in range(1, 20_000, 997):
            assert page_row_budget([total]) >= 1
