"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``SHUFFLE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands receive an ``AppConfig`` instance and build printer options from
``AppConfig.printer``, never from scattered env var lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class PrinterConfig(BaseModel):
    """Table layout defaults for the pretty printer."""

    model_config = ConfigDict(frozen=True)

    padding: int = 4
    border: str = "="
    max_col_width: int = 100
    indent: int = 2
    page_width: Optional[int] = None
    row_numbers: bool = True

    @field_validator("padding", "indent")
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

    @model_validator(mode="after")
    def validate_widths(self) -> "PrinterConfig":
        if self.max_col_width < max(self.padding, 1):
            raise ValueError(
                f"max_col_width ({self.max_col_width}) must be >= padding ({self.padding})."
            )
        return self


class ReaderConfig(BaseModel):
    """CSV reading settings."""

    model_config = ConfigDict(frozen=True)

    delimiter: Optional[str] = None  # None → guess from the first lines
    encoding: str = "utf-8"
    chunk_size: int = 100            # rows pulled per page by ``print``
    sniff_bytes: int = 64 * 1024

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) != 1:
            raise ValueError(f"delimiter must be a single character, got {v!r}.")
        return v

    @field_validator("chunk_size", "sniff_bytes")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}.")
        return v


class SearchConfig(BaseModel):
    """``grep`` settings."""

    model_config = ConfigDict(frozen=True)

    max_rows: int = 500
    ignore_case: bool = False


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "WARNING"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    printer: PrinterConfig = PrinterConfig()
    reader: ReaderConfig = ReaderConfig()
    search: SearchConfig = SearchConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file
            is absent the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        explicit = False
    else:
        explicit = True

    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SHUFFLE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SHUFFLE_* env vars to the raw config dict.

    Supported overrides:
      SHUFFLE_MAX_COL_WIDTH → raw["printer"]["max_col_width"]
      SHUFFLE_PADDING       → raw["printer"]["padding"]
      SHUFFLE_DELIMITER     → raw["reader"]["delimiter"]
      SHUFFLE_LOG_LEVEL     → raw["logging"]["level"]
      SHUFFLE_DEBUG         → raw["debug"]
    """
    if max_width := os.environ.get("SHUFFLE_MAX_COL_WIDTH"):
        raw.setdefault("printer", {})["max_col_width"] = max_width

    if padding := os.environ.get("SHUFFLE_PADDING"):
        raw.setdefault("printer", {})["padding"] = padding

    if delimiter := os.environ.get("SHUFFLE_DELIMITER"):
        raw.setdefault("reader", {})["delimiter"] = delimiter

    if log_level := os.environ.get("SHUFFLE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("SHUFFLE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        printer=PrinterConfig(**raw.get("printer", {})),
        reader=ReaderConfig(**raw.get("reader", {})),
        search=SearchConfig(**raw.get("search", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
