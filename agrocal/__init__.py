"""Agricultural calendar & advisory spreadsheet import pipeline."""

__version__ = "0.3.0"
