"""
csv_shuffle.reader — CSV row source and column statistics.

Modules:
  csv_reader — Lazy row iteration, delimiter guessing, column lookup.
  stats      — One-pass mean / variance / min / max / frequency per column.
"""
