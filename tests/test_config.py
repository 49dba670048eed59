"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from csv_shuffle.config import AppConfig, PrinterConfig, ReaderConfig, load_config

_ENV_VARS = (
    "SHUFFLE_MAX_COL_WIDTH",
    "SHUFFLE_PADDING",
    "SHUFFLE_DELIMITER",
    "SHUFFLE_LOG_LEVEL",
    "SHUFFLE_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "settings.toml"
    path.write_text(
        "[printer]\nmax_col_width = 60\npadding = 2\n\n"
        "[reader]\nchunk_size = 25\n\n"
        "[logging]\nlevel = \"info\"\n",
        encoding="utf-8",
    )
    return path


def test_defaults() -> None:
    config = AppConfig()
    assert config.printer.padding == 4
    assert config.printer.max_col_width == 100
    assert config.printer.border == "="
    assert config.reader.delimiter is None
    assert config.logging.level == "WARNING"


def test_committed_default_file_loads() -> None:
    config = load_config()
    assert config.printer.padding == 4
    assert config.reader.chunk_size == 100
    assert config.search.max_rows == 500


def test_explicit_file(config_file: Path) -> None:
    config = load_config(config_file)
    assert config.printer.max_col_width == 60
    assert config.printer.padding == 2
    assert config.printer.border == "="
    assert config.reader.chunk_size == 25
    assert config.logging.level == "INFO"


def test_missing_explicit_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")


def test_local_toml_overrides(config_file: Path) -> None:
    (config_file.parent / "local.toml").write_text(
        "[printer]\npadding = 1\n", encoding="utf-8"
    )
    config = load_config(config_file)
    assert config.printer.padding == 1
    assert config.printer.max_col_width == 60


def test_env_overrides(config_file: Path, monkeypatch) -> None:
    monkeypatch.setenv("SHUFFLE_MAX_COL_WIDTH", "30")
    monkeypatch.setenv("SHUFFLE_DELIMITER", ";")
    monkeypatch.setenv("SHUFFLE_LOG_LEVEL", "debug")
    monkeypatch.setenv("SHUFFLE_DEBUG", "true")

    config = load_config(config_file)
    assert config.printer.max_col_width == 30
    assert config.reader.delimiter == ";"
    assert config.logging.level == "DEBUG"
    assert config.debug is True


def test_invalid_values_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("[printer]\nborder = \"==\"\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


class TestModels:
    def test_max_width_must_cover_padding(self) -> None:
        with pytest.raises(ValidationError):
            PrinterConfig(padding=10, max_col_width=5)

    def test_delimiter_single_char(self) -> None:
        with pytest.raises(ValidationError):
            ReaderConfig(delimiter="::")

    def test_chunk_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            ReaderConfig(chunk_size=0)

    def test_frozen(self) -> None:
        config = PrinterConfig()
        with pytest.raises(ValidationError):
            config.padding = 3
