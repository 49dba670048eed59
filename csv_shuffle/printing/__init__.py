"""
csv_shuffle.printing — Terminal table rendering.

Modules:
  text     — Stateless padding, indentation and rounding helpers.
  widths   — Column width estimation and the per-page row budget.
  reflow   — Word-aware line breaking for over-wide fields.
  printer  — ``PrettyPrinter``: buffered rows to aligned, paginated text.
  pager    — ``Pager``: interactive page-by-page output.
"""
