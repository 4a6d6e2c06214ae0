"""Utilities for loading exported session recordings."""

from pathlib import Path
from typing import Iterable, Iterator
import io

import numpy as np

from ..core.models import ROW_FIELDS, SampleRow


def _looks_numeric_csv_line(line: str) -> bool:
    """Heuristically decide if a CSV line is numeric-only (no header)."""
    stripped = line.strip()
    if not stripped:
        return False
    tokens = [t.strip() for t in stripped.split(",") if t.strip()]
    if not tokens:
        return False
    try:
        for t in tokens:
            float(t)
        return True
    except ValueError:
        return False


def load_recording(path: Path) -> np.ndarray:
    """
    Load an exported recording as a ``(n, 7)`` float array.

    A single header row is skipped if present, and the trailing comma written
    by the legacy watch format is tolerated.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        first_line = f.readline()
        rest = f.read()

    if _looks_numeric_csv_line(first_line):
        buffer = io.StringIO(first_line + rest)
    else:
        buffer = io.StringIO(rest)

    data = np.loadtxt(
        buffer,
        delimiter=",",
        usecols=range(len(ROW_FIELDS)),
        dtype=np.float64,
        ndmin=2,
    )
    if data.size == 0:
        return np.empty((0, len(ROW_FIELDS)), dtype=np.float64)
    return data


def iter_sample_rows(array: Iterable[Iterable[float]]) -> Iterator[SampleRow]:
    """Yield :class:`SampleRow` objects for each row of ``array``."""
    for values in array:
        yield SampleRow(*(float(v) for v in values))


def duration_seconds(array: np.ndarray) -> float:
    """Span of the ``t`` column (0.0 for fewer than two rows)."""
    if array.shape[0] < 2:
        return 0.0
    return float(array[-1, 0] - array[0, 0])
