"""Tests for regular-expression column search."""

from __future__ import annotations

import pytest

from csv_shuffle.search import compile_pattern, grep_rows

ROWS = [
    ["1", "Alice", "Oslo"],
    ["2", "bob", "Lima"],
    ["3", "Albert"],
    ["4", "Carla", "Oslo"],
]


def test_matches_anywhere_in_field() -> None:
    assert [r[0] for r in grep_rows(ROWS, 2, "sl")] == ["1", "4"]


def test_anchored_pattern() -> None:
    assert [r[0] for r in grep_rows(ROWS, 1, "^Al")] == ["1", "3"]


def test_ignore_case() -> None:
    assert [r[0] for r in grep_rows(ROWS, 1, "^b", ignore_case=True)] == ["2"]
    assert list(grep_rows(ROWS, 1, "^B")) == []


def test_short_rows_never_match() -> None:
    assert [r[0] for r in grep_rows(ROWS, 2, ".*")] == ["1", "2", "4"]


def test_lazy() -> None:
    def rows():
        yield ["a"]
        raise AssertionError("read past the first match")

    assert next(grep_rows(rows(), 0, "a")) == ["a"]


def test_invalid_pattern_fails_before_reading() -> None:
    def rows():
        raise AssertionError("rows should not be read")
        yield []

    with pytest.raises(ValueError, match="Invalid regular expression"):
        grep_rows(rows(), 0, "(unclosed")


def test_compile_pattern_flags() -> None:
    assert compile_pattern("abc", ignore_case=True).search("ABC")
