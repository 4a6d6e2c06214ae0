"""Capacity-bounded row store shared by the accelerometer and gyroscope feeds."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Literal

import numpy as np

from ..errors import BufferFull
from .models import ROW_FIELDS, SampleRow

DEFAULT_CAPACITY = 64000
_INITIAL_ROWS = 1024

_T, _AX, _AY, _AZ, _GX, _GY, _GZ = range(len(ROW_FIELDS))

Pacing = Literal["gyro", "accel"]


class SessionBuffer:
    """
    Ordered ``float32`` rows of ``(t, ax, ay, az, gx, gy, gz)``.

    The accelerometer and gyroscope channels advance independent cursors, so
    row ``i`` is "complete" once both cursors have passed it. Storage grows
    geometrically until ``capacity`` rows; after that every write on the
    full channel raises :class:`BufferFull` without touching existing rows.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._data = np.zeros((min(self._capacity, _INITIAL_ROWS), len(ROW_FIELDS)), dtype=np.float32)
        self._accel_index = 0
        self._gyro_index = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def accel_index(self) -> int:
        return self._accel_index

    @property
    def gyro_index(self) -> int:
        return self._gyro_index

    def reset(self) -> None:
        """Rewind both cursors; the allocated storage is reused."""
        self._data.fill(0.0)
        self._accel_index = 0
        self._gyro_index = 0

    def write_accel(self, t: float, ax: float, ay: float, az: float) -> None:
        idx = self._accel_index
        if idx >= self._capacity:
            raise BufferFull("accelerometer", self._capacity)
        self._ensure_rows(idx + 1)
        row = self._data[idx]
        row[_T] = t
        row[_AX] = ax
        row[_AY] = ay
        row[_AZ] = az
        self._accel_index = idx + 1

    def write_gyro(self, gx: float, gy: float, gz: float) -> None:
        idx = self._gyro_index
        if idx >= self._capacity:
            raise BufferFull("gyroscope", self._capacity)
        self._ensure_rows(idx + 1)
        row = self._data[idx]
        row[_GX] = gx
        row[_GY] = gy
        row[_GZ] = gz
        self._gyro_index = idx + 1

    def snapshot_for_export(self, pacing: Pacing = "gyro") -> np.ndarray:
        """
        Return a copy of the rows to export, shape ``(n, 7)``.

        ``n`` is the gyroscope cursor: each gyroscope event completes a row
        already stamped by the accelerometer. Rows past ``accel_index`` keep
        zeroed ``t``/accelerometer fields. ``pacing="accel"`` is only meant for
        accelerometer-only sessions.
        """
        if pacing == "gyro":
            count = self._gyro_index
        elif pacing == "accel":
            count = self._accel_index
        else:
            raise ValueError(f"unknown pacing {pacing!r}")
        return np.array(self._data[:count], copy=True)

    def rows(self, pacing: Pacing = "gyro") -> Iterator[SampleRow]:
        for values in self.snapshot_for_export(pacing):
            yield SampleRow(*(float(v) for v in values))

    def __len__(self) -> int:
        return self._gyro_index

    def _ensure_rows(self, needed: int) -> None:
        allocated = self._data.shape[0]
        if needed <= allocated:
            return
        new_size = min(self._capacity, max(needed, allocated * 2))
        grown = np.zeros((new_size, len(ROW_FIELDS)), dtype=np.float32)
        grown[:allocated] = self._data
        self._data = grown
