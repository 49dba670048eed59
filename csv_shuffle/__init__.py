"""csv_shuffle — command-line toolkit for printing, searching and converting CSV files."""

__version__ = "0.3.0"
