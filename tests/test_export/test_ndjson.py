"""Tests for the CSV → NDJSON exporter."""

from __future__ import annotations

import json
from pathlib import Path

from csv_shuffle.export.ndjson import csv_to_json, default_json_path


def test_writes_one_object_per_row(people_csv: Path, tmp_path: Path) -> None:
    out = tmp_path / "people.ndjson"
    assert csv_to_json(people_csv, out) == 5

    records = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert len(records) == 5
    assert records[0] == {"id": "1", "name": "Alice", "age": "34", "city": "Oslo"}
    assert records[3]["age"] == ""


def test_short_rows_get_nulls(write_csv, tmp_path: Path) -> None:
    path = write_csv("a,b,c\n1,2,3\n4\n")
    out = tmp_path / "nested" / "out.ndjson"
    csv_to_json(path, out, delimiter=",")

    last = json.loads(out.read_text(encoding="utf-8").splitlines()[-1])
    assert last == {"a": "4", "b": None, "c": None}


def test_non_ascii_kept(write_csv, tmp_path: Path) -> None:
    path = write_csv("city\nZürich\n")
    out = tmp_path / "c.ndjson"
    csv_to_json(path, out)
    assert "Zürich" in out.read_text(encoding="utf-8")


def test_default_path(people_csv: Path) -> None:
    assert default_json_path(people_csv) == people_csv.with_name("people.csv.ndjson")
    csv_to_json(people_csv)
    assert default_json_path(people_csv).exists()
