"""
csv-shuffle — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs (file exists, column resolves, regex compiles).
  4. Execute (print / search / summarise / convert).
  5. Report result to stdout; errors go to stderr with exit code 1.

Install and run::

    pip install -e .
    shuffle --help
    shuffle print data.csv
    shuffle info data.csv
    shuffle grep data.csv name "^A"
    shuffle stat data.csv
    shuffle json data.csv data.ndjson
    shuffle sql data.csv data.sqlite
    shuffle parquet data.csv data.parquet
    shuffle query data.sqlite "SELECT * FROM data LIMIT 10"

Paging pauses only when both stdin and stdout are terminals; pass
``--no-pager`` to print everything in one go.
"""

from __future__ import annotations

import json
import sqlite3
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

import typer

app = typer.Typer(
    name="shuffle",
    help="Print, search, summarise and convert CSV files.",
    add_completion=False,
)

STAT_ROW_NAMES = ["Mean", "Variance", "Min", "Max"]
TOP_N_VALUES = 10


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from csv_shuffle.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from csv_shuffle.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"[ERROR] {message}", err=True)
    return typer.Exit(code=1)


def _key_reader(no_pager: bool):
    """Terminal key reader when interactive, otherwise never pause."""
    from csv_shuffle.printing.pager import never_pause, read_terminal_key

    if no_pager or not (sys.stdin.isatty() and sys.stdout.isatty()):
        return never_pause
    return read_terminal_key


def _printer(config, col_names: Sequence[str] = (), **overrides):
    """Build a PrettyPrinter from the ``[printer]`` config section."""
    from csv_shuffle.printing.printer import PrettyPrinter, PrinterParams

    options = config.printer.model_dump()
    options.update({k: v for k, v in overrides.items() if v is not None})
    return PrettyPrinter(PrinterParams(col_names=list(col_names), **options))


def _page(
    printer,
    no_pager: bool,
    rows: Optional[Iterable[Sequence[str]]] = None,
    chunk_size: Optional[int] = None,
) -> bool:
    """Page ``printer`` (topped up lazily from ``rows``); return False if the user quit."""
    from csv_shuffle.printing.pager import DEFAULT_CHUNK_SIZE, Pager, PagerResult

    pager = Pager(
        printer,
        read_key=_key_reader(no_pager),
        source=rows,
        chunk_size=chunk_size or DEFAULT_CHUNK_SIZE,
    )
    return pager.run() is PagerResult.EXHAUSTED


def _echo_lines(lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(line)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("print")
def print_file(
    file: Path = typer.Argument(..., help="CSV file to print."),
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-n",
        min=1,
        help="Rows read per page (default: reader.chunk_size from config).",
    ),
    max_col_width: Optional[int] = typer.Option(
        None,
        "--max-col-width",
        min=1,
        help="Wrap fields wider than this many characters.",
    ),
    page_width: Optional[int] = typer.Option(
        None,
        "--page-width",
        min=1,
        help="Split wide tables into column blocks of about this width.",
    ),
    no_row_numbers: bool = typer.Option(
        False,
        "--no-row-numbers",
        help="Hide the [n] row number column.",
    ),
    no_pager: bool = typer.Option(
        False,
        "--no-pager",
        help="Print everything without pausing between pages.",
    ),
    delimiter: Optional[str] = typer.Option(
        None,
        "--delimiter",
        "-d",
        help="Field delimiter (guessed when omitted).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Pretty print a CSV file to the terminal, one page at a time."""
    from csv_shuffle.reader.csv_reader import CSVReader

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with CSVReader(
            file,
            delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
            sniff_bytes=config.reader.sniff_bytes,
        ) as reader:
            printer = _printer(
                config,
                reader.col_names,
                max_col_width=max_col_width,
                page_width=page_width,
                row_numbers=False if no_row_numbers else None,
            )
            _page(printer, no_pager, reader, rows or config.reader.chunk_size)
            bad_rows = reader.bad_rows
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))

    if bad_rows:
        typer.echo(f"[WARN] Skipped {bad_rows} malformed row(s).", err=True)


@app.command("info")
def info(
    file: Path = typer.Argument(..., help="CSV file to describe."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Display the delimiter, row count and column names of a CSV file."""
    from csv_shuffle.printing.printer import long_table
    from csv_shuffle.reader.csv_reader import get_file_info

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        file_info = get_file_info(
            file,
            delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))

    delim = "\\t" if file_info.delimiter == "\t" else file_info.delimiter
    records = [
        ["Delimiter", delim],
        ["Rows", str(file_info.n_rows)],
        ["Columns", str(file_info.n_cols)],
    ]
    records += [[f"[{i}]", name] for i, name in enumerate(file_info.col_names)]
    if file_info.bad_rows:
        records.append(["Malformed rows", str(file_info.bad_rows)])

    typer.echo(file_info.filename)
    _echo_lines(long_table(records, [20, 60]))


@app.command("grep")
def grep(
    file: Path = typer.Argument(..., help="CSV file to search."),
    column: str = typer.Argument(..., help="Column name or zero-based index."),
    pattern: str = typer.Argument(..., help="Regular expression (re.search semantics)."),
    max_rows: Optional[int] = typer.Option(
        None,
        "--max-rows",
        min=1,
        help="Matches shown per page (default: search.max_rows from config).",
    ),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case-insensitive match."),
    no_pager: bool = typer.Option(False, "--no-pager", help="Do not pause between pages."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print all rows whose COLUMN matches a regular expression."""
    from csv_shuffle.reader.csv_reader import CSVReader, resolve_column
    from csv_shuffle.search import grep_rows

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with CSVReader(
            file,
            delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
            sniff_bytes=config.reader.sniff_bytes,
        ) as reader:
            col = resolve_column(reader.col_names, column)
            matches = grep_rows(
                reader, col, pattern, ignore_case=ignore_case or config.search.ignore_case
            )
            printer = _printer(config, reader.col_names)
            _page(printer, no_pager, matches, max_rows or config.search.max_rows)
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))


@app.command("stat")
def stat(
    file: Path = typer.Argument(..., help="CSV file to summarise."),
    top_n: int = typer.Option(TOP_N_VALUES, "--top-n", min=1, help="Most common values shown."),
    no_pager: bool = typer.Option(False, "--no-pager", help="Do not pause between pages."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Calculate summary statistics and value frequencies for every column."""
    from csv_shuffle.printing.text import rep, round_values
    from csv_shuffle.reader.csv_reader import CSVReader
    from csv_shuffle.reader.stats import calc_stats

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with CSVReader(
            file,
            delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
            sniff_bytes=config.reader.sniff_bytes,
        ) as reader:
            col_names = list(reader.col_names)
            stats = calc_stats(reader, col_names)
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))

    typer.echo(f"{file} - Full Statistics Report")
    typer.echo(rep("=", 120))
    typer.echo("")

    typer.echo("Summary Statistics")
    typer.echo(rep("-", 120))
    summary = _printer(config, col_names, row_names=STAT_ROW_NAMES)
    summary.feed([
        round_values(s.mean_value for s in stats),
        round_values(s.variance for s in stats),
        round_values(s.min for s in stats),
        round_values(s.max for s in stats),
    ])
    if not _page(summary, no_pager):
        return

    typer.echo("")
    typer.echo(f"Frequency Counts - Top {top_n} Most Common Values")
    typer.echo(rep("-", 120))
    tops = [s.top_values(top_n) for s in stats]
    counts = _printer(config, col_names, row_numbers=False)
    counts.feed([
        [f"{top[i][0]}: {top[i][1]}" if i < len(top) else "" for top in tops]
        for i in range(max((len(t) for t in tops), default=0))
    ])
    _page(counts, no_pager)


@app.command("json")
def to_json(
    file: Path = typer.Argument(..., help="CSV file to convert."),
    out: Optional[Path] = typer.Argument(None, help="Output file (default: FILE.ndjson)."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Convert a CSV file to newline-delimited JSON."""
    from csv_shuffle.export.ndjson import csv_to_json, default_json_path

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target = out or default_json_path(file)
    try:
        written = csv_to_json(
            file, target, delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))

    typer.echo(f"[OK] Wrote {written} row(s) to {target}")


@app.command("sql")
def to_sql(
    file: Path = typer.Argument(..., help="CSV file to load."),
    db: Optional[Path] = typer.Argument(None, help="SQLite database (default: <name>.sqlite)."),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Table name (default: file name)."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Load a CSV file into a new SQLite table."""
    from csv_shuffle.export.sqlite import csv_to_sql, default_table_name

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if db is None:
        db = Path(default_table_name(file) + ".sqlite")
        typer.echo(f"Outputting database to {db}")

    try:
        inserted = csv_to_sql(
            file, db, table=table, delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
        )
    except (FileNotFoundError, ValueError, sqlite3.Error) as exc:
        raise _fail(str(exc))

    typer.echo(f"[OK] Inserted {inserted} row(s) into {db}")


@app.command("parquet")
def to_parquet(
    file: Path = typer.Argument(..., help="CSV file to convert."),
    out: Optional[Path] = typer.Argument(None, help="Output file (default: FILE with .parquet)."),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Field delimiter."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Convert a CSV file to Parquet with inferred column types."""
    from csv_shuffle.export.parquet import csv_to_parquet, default_parquet_path

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target = out or default_parquet_path(file)
    try:
        written = csv_to_parquet(
            file, target, delimiter=delimiter or config.reader.delimiter,
            encoding=config.reader.encoding,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc))

    typer.echo(f"[OK] Wrote {written} row(s) to {target}")


@app.command("query")
def query(
    db: Path = typer.Argument(..., help="SQLite database file."),
    sql: str = typer.Argument(..., help="SQL query to run."),
    rows: int = typer.Option(100, "--rows", "-n", min=1, help="Result rows per page."),
    no_pager: bool = typer.Option(False, "--no-pager", help="Do not pause between pages."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Run a SQL query against a SQLite database and page through the result."""
    from csv_shuffle.db import get_connection, run_query

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if not db.exists():
        raise _fail(f"Database not found: {db}")

    try:
        with get_connection(db) as conn:
            col_names, result = run_query(conn, sql)
            if not col_names:
                typer.echo("[OK] Statement executed.")
                return
            _page(_printer(config, col_names), no_pager, result, rows)
    except sqlite3.Error as exc:
        raise _fail(f"SQLite error: {exc}")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Max column width: {config.printer.max_col_width}")
    typer.echo(f"  Padding:          {config.printer.padding}")
    typer.echo(f"  Page width:       {config.printer.page_width or 'unlimited'}")
    typer.echo(f"  Delimiter:        {config.reader.delimiter or '(guess)'}")
    typer.echo(f"  Rows per page:    {config.reader.chunk_size}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
