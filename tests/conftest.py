"""
Shared pytest fixtures for the csv-shuffle test suite.

Provides:
  - ``write_csv``: factory writing CSV text into ``tmp_path``.
  - ``people_csv``: a small comma-separated file with a header row.
  - ``keys``: factory for scripted pager key readers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

PEOPLE_CSV = """\
id,name,age,city
1,Alice,34,Oslo
2,Bob,27,Lima
3,Carla,41,Oslo
4,Dmitri,,Kyiv
5,Eve,29.5,Oslo
"""


# ── Files ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing ``text`` to ``tmp_path / name``."""

    def _write(text: str, name: str = "data.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def people_csv(write_csv) -> Path:
    """Five people with an id, name, age (one blank, one float) and city."""
    return write_csv(PEOPLE_CSV, "people.csv")


# ── Pager input ───────────────────────────────────────────────────────────────

@pytest.fixture
def keys() -> Callable[[Iterable[str]], Callable[[], str]]:
    """Return a factory building a key reader that replays ``presses``.

    The reader records how often it was called in its ``calls`` attribute and
    raises ``AssertionError`` if asked for more keys than were scripted.
    """

    def _factory(presses: Iterable[str]):
        queue = list(presses)

        def read_key() -> str:
            read_key.calls += 1
            assert queue, "pager asked for more keystrokes than scripted"
            return queue.pop(0)

        read_key.calls = 0
        return read_key

    return _factory
