"""CSV writing for recorded sessions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence, Union

import numpy as np

from ..core.models import ROW_FIELDS, SampleRow
from ..errors import ExportError
from ..tools.debug import time_block

logger = logging.getLogger(__name__)

Rows = Union[np.ndarray, Iterable[SampleRow], Iterable[Sequence[float]]]


def _as_array(rows: Rows) -> np.ndarray:
    if isinstance(rows, np.ndarray):
        array = rows
    else:
        array = np.array(
            [row.as_tuple() if isinstance(row, SampleRow) else tuple(row) for row in rows],
            dtype=np.float32,
        )
    if array.size == 0:
        return np.empty((0, len(ROW_FIELDS)), dtype=np.float32)
    array = np.atleast_2d(array)
    if array.shape[1] != len(ROW_FIELDS):
        raise ValueError(f"expected {len(ROW_FIELDS)} columns per row, got {array.shape[1]}")
    return array


class CsvExporter:
    """
    Write session rows as headerless CSV.

    Every line carries ``t, ax, ay, az, gx, gy, gz`` formatted with
    ``float_format`` and joined by ``delimiter``. The destination is
    truncated (or created) on every export.
    """

    def __init__(
        self,
        float_format: str = "%f",
        delimiter: str = ", ",
        *,
        legacy_trailing_comma: bool = False,
    ) -> None:
        self.float_format = float_format
        self.delimiter = delimiter
        self.legacy_trailing_comma = legacy_trailing_comma

    @property
    def row_format(self) -> str:
        fmt = self.delimiter.join([self.float_format] * len(ROW_FIELDS))
        if self.legacy_trailing_comma:
            # The watch build terminated each line with a stray comma.
            fmt += ","
        return fmt

    def format_row(self, row: Sequence[float]) -> str:
        return self.row_format % tuple(float(v) for v in row)

    def export(self, rows: Rows, destination: Path | str) -> int:
        """Write ``rows`` to ``destination`` and return the row count."""
        path = Path(destination)
        array = _as_array(rows)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with time_block(f"export {array.shape[0]} rows"):
                with path.open("w", encoding="utf-8", newline="\n") as fh:
                    np.savetxt(fh, array, fmt=self.row_format, newline="\n")
        except OSError as exc:
            logger.error("Export to %s failed: %s", path, exc)
            raise ExportError(path, exc) from exc
        logger.info("Exported %d rows to %s", array.shape[0], path)
        return int(array.shape[0])


def write_rows(path: Path, rows: Rows, **kwargs) -> int:
    """Convenience wrapper: export ``rows`` to ``path`` with default formatting."""
    return CsvExporter(**kwargs).export(rows, path)
