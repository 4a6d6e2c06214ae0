"""
Threaded stand-in for the device sensor framework.

Each started listener runs a small thread that ticks at the subscribed
interval and emits a synthetic wrist-swing signal: a sinusoidal swing on top
of gravity for the accelerometer (m/s²) and the matching angular rate for the
gyroscope (deg/s), plus a little Gaussian noise.

Used by the ``swingmetrics record`` CLI and handy for demos on a desktop.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional

import numpy as np

from .feed import EventCallback, SensorEvent, SensorKind, SensorOption

logger = logging.getLogger(__name__)

G_TO_MS2 = 9.80665


@dataclass(frozen=True)
class SimulatedSensor:
    kind: SensorKind
    name: str


def monotonic_controller(interval_ms: int) -> Iterator[int]:
    """Yield target ``monotonic_ns`` deadlines spaced by ``interval_ms``.

    Each deadline is the previous *target* plus one period, so sleep jitter
    does not accumulate into drift.
    """
    period = int(interval_ms * 1_000_000)
    next_t = time.monotonic_ns()
    while True:
        next_t += period
        yield next_t


class SimulatedListener:
    def __init__(
        self,
        sensor: SimulatedSensor,
        *,
        swing_hz: float = 1.2,
        noise: float = 0.05,
        seed: Optional[int] = None,
    ) -> None:
        self.sensor = sensor
        self.swing_hz = swing_hz
        self.noise = noise
        self.interval_ms: Optional[int] = None
        self.option = SensorOption.DEFAULT
        self._callback: Optional[EventCallback] = None
        self._rng = np.random.default_rng(seed)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def set_event_cb(self, interval_ms: int, callback: EventCallback) -> None:
        self.interval_ms = int(interval_ms)
        self._callback = callback

    def set_option(self, option: SensorOption) -> None:
        self.option = SensorOption(option)

    def start(self) -> None:
        if self._callback is None or self.interval_ms is None:
            raise RuntimeError("listener has no event callback")
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"SimulatedListener({self.sensor.name})",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        self._thread = None

    def _run(self) -> None:
        assert self._callback is not None and self.interval_ms is not None
        start_ns = time.monotonic_ns()
        for deadline in monotonic_controller(self.interval_ms):
            delay = (deadline - time.monotonic_ns()) / 1e9
            if self._stop_event.wait(max(0.0, delay)):
                break
            now_ns = time.monotonic_ns()
            values = self._sample((now_ns - start_ns) / 1e9)
            try:
                self._callback(SensorEvent(self.sensor.kind, values, now_ns))
            except Exception:
                logger.exception("Event callback failed for %s", self.sensor.name)

    def _sample(self, t_s: float) -> tuple[float, float, float]:
        phase = 2.0 * math.pi * self.swing_hz * t_s
        jitter = self._rng.normal(0.0, self.noise, size=3)
        if self.sensor.kind is SensorKind.ACCELEROMETER:
            base = (4.0 * math.sin(phase), 1.5 * math.cos(phase), G_TO_MS2)
        else:
            base = (20.0 * math.cos(phase), 180.0 * math.cos(phase), 35.0 * math.sin(phase))
        return tuple(float(b + j) for b, j in zip(base, jitter))  # type: ignore[return-value]


class SimulatedPlatform:
    """In-process sensor framework with a configurable set of supported kinds."""

    def __init__(
        self,
        supported: Iterable[SensorKind] = (SensorKind.ACCELEROMETER, SensorKind.GYROSCOPE),
        *,
        seed: Optional[int] = None,
    ) -> None:
        self._sensors: Dict[SensorKind, SimulatedSensor] = {
            SensorKind(kind): SimulatedSensor(SensorKind(kind), f"sim-{SensorKind(kind).value}")
            for kind in supported
        }
        self._seed = seed

    def is_supported(self, kind: SensorKind) -> bool:
        return SensorKind(kind) in self._sensors

    def get_default_sensor(self, kind: SensorKind) -> Optional[SimulatedSensor]:
        return self._sensors.get(SensorKind(kind))

    def create_listener(self, sensor: SimulatedSensor) -> SimulatedListener:
        return SimulatedListener(sensor, seed=self._seed)
