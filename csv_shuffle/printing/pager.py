"""
Interactive paging on top of :class:`~csv_shuffle.printing.printer.PrettyPrinter`.

The pager prints one page at a time and, while more rows may follow, asks the
user whether to continue::

    Press Enter to continue printing, or q or Ctrl + C to quit.

Keystrokes come from a ``read_key`` callable so the pager can be driven by a
terminal (``read_terminal_key``), by tests (a scripted iterator) or never pause
at all (``never_pause``).  Pressing ``q`` or interrupting the read ends the run
with ``PagerResult.CANCELLED``; running out of rows ends it with
``PagerResult.EXHAUSTED``.  Neither outcome is an exception.

Rows can be fed to the printer up front, or pulled lazily from ``source``
``chunk_size`` rows at a time.  A lazy source is never read ahead: after a
full chunk the pager cannot know whether more rows follow, so it prompts.
"""

from __future__ import annotations

import itertools
import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional, Sequence

import typer

if TYPE_CHECKING:
    from typing import TextIO

    from csv_shuffle.printing.printer import PrettyPrinter

logger = logging.getLogger(__name__)

KeyReader = Callable[[], str]

PROMPT = "Press Enter to continue printing, or q or Ctrl + C to quit."
QUIT_KEYS = frozenset({"q", "Q"})
DEFAULT_CHUNK_SIZE = 50


class PagerResult(str, Enum):
    """How a paging run ended."""

    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


def read_terminal_key() -> str:
    """Block until the user presses a key and return it."""
    return typer.getchar()


def never_pause() -> str:
    """Key reader for non-interactive output: always continue."""
    return "\n"


class Pager:
    """Drive a printer page by page, pausing for the user in between.

    Args:
        printer:    Printer holding (or receiving) the rows.
        out:        Output stream (default: stdout).
        read_key:   Callable returning one keystroke per call.
        source:     Optional lazy row iterable; pulled ``chunk_size`` rows
                    at a time as pages are needed.
        chunk_size: Rows pulled from ``source`` per page.
    """

    def __init__(
        self,
        printer: "PrettyPrinter",
        out: Optional["TextIO"] = None,
        read_key: Optional[KeyReader] = None,
        source: Optional[Iterable[Sequence[str]]] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}.")
        self.printer    = printer
        self.out        = out
        self.read_key   = read_key or read_terminal_key
        self.chunk_size = chunk_size
        self.pages_printed = 0

        self._source: Optional[Iterator[Sequence[str]]] = (
            iter(source) if source is not None else None
        )
        self._source_done = source is None

    # ── Public ───────────────────────────────────────────────────────────────

    def run(self) -> PagerResult:
        """Print pages until the rows run out or the user quits."""
        while True:
            self._pull()
            if not self.printer.format():
                break

            self._write_page(self.printer.flush())

            if not self._more_may_follow():
                break
            if self._should_stop():
                logger.info("Paging stopped by user after %d page(s).", self.pages_printed)
                return PagerResult.CANCELLED

        logger.debug("Paging finished after %d page(s).", self.pages_printed)
        return PagerResult.EXHAUSTED

    # ── Internals ────────────────────────────────────────────────────────────

    def _pull(self) -> None:
        """Top the printer up from the lazy source when it has run dry."""
        if self._source_done or self.printer.pending:
            return
        chunk = list(itertools.islice(self._source, self.chunk_size))
        if len(chunk) < self.chunk_size:
            self._source_done = True
        if chunk:
            self.printer.feed(chunk)

    def _more_may_follow(self) -> bool:
        return self.printer.pending > 0 or not self._source_done

    def _write_page(self, lines: list[str]) -> None:
        for line in lines:
            typer.echo(line, file=self.out)
        self.pages_printed += 1

    def _should_stop(self) -> bool:
        typer.echo("", file=self.out)
        typer.echo(PROMPT, file=self.out)
        typer.echo("", file=self.out)
        try:
            key = self.read_key()
        except (KeyboardInterrupt, EOFError):
            return True
        return key in QUIT_KEYS
