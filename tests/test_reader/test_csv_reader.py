"""Tests for the lazy CSV reader and its convenience helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from csv_shuffle.reader.csv_reader import (
    CSVReader,
    get_col_names,
    get_col_pos,
    get_file_info,
    guess_delimiter,
    read_rows,
    resolve_column,
)


class TestGuessDelimiter:
    @pytest.mark.parametrize("delim", [",", ";", "|", "\t"])
    def test_detects_candidates(self, delim: str) -> None:
        lines = [["a", "b", "c"], ["1", "2", "3"], ["4", "5", "6"]]
        sample = "".join(delim.join(line) + "\n" for line in lines)
        assert guess_delimiter(sample) == delim

    def test_empty_sample_defaults_to_comma(self) -> None:
        assert guess_delimiter("") == ","


class TestCSVReader:
    def test_header_and_rows(self, people_csv: Path) -> None:
        with CSVReader(people_csv) as reader:
            assert reader.col_names == ["id", "name", "age", "city"]
            rows = list(reader)
        assert len(rows) == 5
        assert rows[3] == ["4", "Dmitri", "", "Kyiv"]
        assert reader.n_rows == 5

    def test_semicolon_file(self, write_csv) -> None:
        path = write_csv("a;b\n1;2\n3;4\n")
        with CSVReader(path) as reader:
            assert reader.delimiter == ";"
            assert list(reader) == [["1", "2"], ["3", "4"]]

    def test_explicit_delimiter(self, write_csv) -> None:
        path = write_csv("a|b\n1|2\n")
        with CSVReader(path, delimiter="|") as reader:
            assert list(reader) == [["1", "2"]]

    def test_quoted_fields(self, write_csv) -> None:
        path = write_csv('name,note\nAda,"hello, world"\nBo,"two\nlines"\n')
        with CSVReader(path, delimiter=",") as reader:
            rows = list(reader)
        assert rows == [["Ada", "hello, world"], ["Bo", "two\nlines"]]

    def test_blank_lines_skipped(self, write_csv) -> None:
        path = write_csv("a,b\n\n1,2\n\n3,4\n")
        assert list(read_rows(path, delimiter=",")) == [["1", "2"], ["3", "4"]]

    def test_long_rows_skipped_and_counted(self, write_csv) -> None:
        path = write_csv("a,b\n1,2\n1,2,3\n4\n")
        with CSVReader(path, delimiter=",") as reader:
            rows = list(reader)
        assert rows == [["1", "2"], ["4"]]
        assert reader.bad_rows == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            CSVReader(tmp_path / "nope.csv")

    def test_empty_file(self, write_csv) -> None:
        with pytest.raises(ValueError):
            CSVReader(write_csv(""))


class TestHelpers:
    def test_get_col_names(self, people_csv: Path) -> None:
        assert get_col_names(people_csv) == ["id", "name", "age", "city"]

    def test_get_col_pos_by_name(self, people_csv: Path) -> None:
        assert get_col_pos(people_csv, "age") == 2

    def test_get_col_pos_by_index(self, people_csv: Path) -> None:
        assert get_col_pos(people_csv, "3") == 3
        assert get_col_pos(people_csv, 1) == 1

    def test_name_wins_over_index(self) -> None:
        assert resolve_column(["x", "0", "y"], "0") == 1

    def test_unknown_column(self) -> None:
        with pytest.raises(ValueError, match="Available columns"):
            resolve_column(["a", "b"], "c")

    def test_index_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            resolve_column(["a", "b"], "5")

    def test_file_info(self, people_csv: Path) -> None:
        info = get_file_info(people_csv)
        assert info.delimiter == ","
        assert info.n_rows == 5
        assert info.n_cols == 4
        assert info.col_names == ["id", "name", "age", "city"]
        assert info.bad_rows == 0
        assert info.filename == str(people_csv)
