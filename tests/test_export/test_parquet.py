"""Tests for the CSV → Parquet exporter."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from csv_shuffle.export import parquet as parquet_export
from csv_shuffle.export.parquet import build_schema, csv_to_parquet, default_parquet_path
from csv_shuffle.reader.stats import DataType


def test_schema_types() -> None:
    schema = build_schema(
        ["a", "b", "c", "d"],
        [DataType.INTEGER, DataType.FLOAT, DataType.STRING, DataType.NULL],
    )
    assert schema.field("a").type == pa.int64()
    assert schema.field("b").type == pa.float64()
    assert schema.field("c").type == pa.string()
    assert schema.field("d").type == pa.string()
    assert all(schema.field(n).nullable for n in "abcd")


def test_writes_typed_columns(people_csv: Path, tmp_path: Path) -> None:
    out = tmp_path / "people.parquet"
    assert csv_to_parquet(people_csv, out) == 5

    table = pq.read_table(out)
    assert table.num_rows == 5
    assert table.schema.field("id").type == pa.int64()
    assert table.schema.field("age").type == pa.float64()
    assert table.column("age").to_pylist() == [34.0, 27.0, 41.0, None, 29.5]
    assert table.column("city").to_pylist()[0] == "Oslo"


def test_unparseable_numbers_become_null(write_csv, tmp_path: Path) -> None:
    path = write_csv("n\n1\n2\n3\noops\n")
    out = tmp_path / "n.parquet"
    csv_to_parquet(path, out, delimiter=",")
    assert pq.read_table(out).column("n").to_pylist() == [1, 2, 3, None]


def test_multiple_batches(write_csv, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(parquet_export, "BATCH_SIZE", 2)
    path = write_csv("x\n" + "".join(f"{i}\n" for i in range(5)))
    out = tmp_path / "x.parquet"
    assert csv_to_parquet(path, out, delimiter=",") == 5
    assert pq.read_table(out).column("x").to_pylist() == [0, 1, 2, 3, 4]


def test_default_path(people_csv: Path) -> None:
    assert default_parquet_path(people_csv) == people_csv.with_suffix(".parquet")
