"""Data input/output helpers (CSV export, loading and file paths).

- :mod:`csv_writer` writes finished sessions as headerless CSV.
- :mod:`log_loader` reads those files back for offline review.
- :mod:`file_paths` centralises where recordings are written.
"""

from .csv_writer import CsvExporter

__all__ = ["CsvExporter"]
