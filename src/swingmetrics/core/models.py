"""Shared dataclasses for SwingMetrics sessions and samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import RecorderError

# Column order of a recorded row (and of the exported CSV).
ROW_FIELDS: Tuple[str, ...] = ("t", "ax", "ay", "az", "gx", "gy", "gz")


@dataclass(frozen=True)
class SampleRow:
    t: float
    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float

    def as_tuple(self) -> Tuple[float, ...]:
        return (self.t, self.ax, self.ay, self.az, self.gx, self.gy, self.gz)


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


@dataclass
class StartReport:
    """Outcome of :meth:`RecordingSession.start`.

    ``errors`` maps a channel name (``"accelerometer"``/``"gyroscope"``) to
    the error that kept it from capturing.
    """

    started: bool
    active: List[str] = field(default_factory=list)
    errors: Dict[str, RecorderError] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return bool(self.errors)


@dataclass
class StopReport:
    """Summary of a finished session and its export."""

    rows_exported: int
    destination: Optional[Path]
    accel_count: int
    gyro_count: int
    overflowed: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
