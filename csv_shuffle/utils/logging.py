"""
Root logger setup for the ``shuffle`` CLI.

stdout carries the tables, so every handler installed here writes to
**stderr** (or to ``[logging] log_file``).  ``shuffle print data.csv | less``
therefore never interleaves a warning about a skipped row with table text.

Library modules only ever call ``logging.getLogger(__name__)``; the CLI calls
``configure_logging()`` once per command, after the config is loaded.

With ``json_format = true`` each record becomes one line such as::

    {"ts": "2026-10-17T09:30:00Z", "level": "WARNING",
     "logger": "csv_shuffle.reader.csv_reader", "msg": "data.csv line 7: ..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from csv_shuffle.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record, with ``extra=`` fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _handler(
    level: int,
    formatter: logging.Formatter,
    log_file: Optional[Path] = None,
) -> logging.Handler:
    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Force ``DEBUG`` regardless of ``config.level``
            (``AppConfig.debug`` / ``SHUFFLE_DEBUG``).
    """
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.WARNING)
    formatter = (
        _JsonFormatter()
        if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers = [_handler(level, formatter)]
    if config.log_file:
        handlers.append(_handler(level, formatter, Path(config.log_file)))

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.getLogger("pyarrow").setLevel(logging.WARNING)
