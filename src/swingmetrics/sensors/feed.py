"""
Sensor feeds on top of the device sensor framework.

The framework is modelled by :class:`SensorPlatform`: it answers whether a
sensor kind is supported, hands out the default sensor handle for a kind and
creates listeners on it. A listener delivers :class:`SensorEvent` objects to
one callback at a requested interval once started.

:class:`SensorFeed` owns one sensor handle and one listener and exposes the
four calls the recorder needs: ``open``, ``subscribe``, ``start`` and
``stop``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Tuple

from ..errors import SensorUnavailable, SubscriptionError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 50


class SensorKind(str, Enum):
    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"


class SensorOption(str, Enum):
    DEFAULT = "default"
    # Keep delivering while the display is off / the device is suspended.
    ALWAYS_ON = "always_on"


@dataclass(frozen=True)
class SensorEvent:
    kind: SensorKind
    values: Tuple[float, float, float]
    timestamp_ns: int


EventCallback = Callable[[SensorEvent], None]


class SensorListener(Protocol):
    def set_event_cb(self, interval_ms: int, callback: EventCallback) -> None:  # pragma: no cover - protocol
        ...

    def set_option(self, option: SensorOption) -> None:  # pragma: no cover - protocol
        ...

    def start(self) -> None:  # pragma: no cover - protocol
        ...

    def stop(self) -> None:  # pragma: no cover - protocol
        ...


class SensorPlatform(Protocol):
    def is_supported(self, kind: SensorKind) -> bool:  # pragma: no cover - protocol
        ...

    def get_default_sensor(self, kind: SensorKind) -> Optional[Any]:  # pragma: no cover - protocol
        ...

    def create_listener(self, sensor: Any) -> SensorListener:  # pragma: no cover - protocol
        ...


class SensorFeed:
    """One platform sensor plus its listener, forwarding events to a callback."""

    def __init__(self, platform: SensorPlatform, kind: SensorKind, *, always_on: bool = True) -> None:
        self.platform = platform
        self.kind = SensorKind(kind)
        self.always_on = always_on
        self._sensor: Any = None
        self._listener: Optional[SensorListener] = None
        self._active = False

    @property
    def is_open(self) -> bool:
        return self._sensor is not None

    @property
    def is_active(self) -> bool:
        return self._active

    def open(self) -> None:
        """Resolve the default sensor of this feed's kind."""
        try:
            supported = self.platform.is_supported(self.kind)
        except Exception as exc:
            raise SensorUnavailable(self.kind.value, f"support query failed ({exc})") from exc
        if not supported:
            raise SensorUnavailable(self.kind.value, "not supported on this device")

        sensor = self.platform.get_default_sensor(self.kind)
        if sensor is None:
            raise SensorUnavailable(self.kind.value, "no default sensor")
        self._sensor = sensor
        logger.debug("Opened %s sensor %r", self.kind.value, sensor)

    def subscribe(self, interval_ms: int, on_event: EventCallback) -> None:
        """Create the listener and register ``on_event`` at ``interval_ms``."""
        if self._sensor is None:
            raise SubscriptionError(self.kind.value, "sensor is not open")
        if interval_ms <= 0:
            raise SubscriptionError(self.kind.value, f"invalid interval {interval_ms} ms")

        if self._listener is not None:
            self.stop()
            self._listener = None

        try:
            listener = self.platform.create_listener(self._sensor)
            listener.set_event_cb(int(interval_ms), on_event)
            if self.always_on:
                listener.set_option(SensorOption.ALWAYS_ON)
        except SubscriptionError:
            raise
        except Exception as exc:
            raise SubscriptionError(self.kind.value, str(exc)) from exc
        self._listener = listener
        logger.debug(
            "Subscribed to %s every %d ms (always_on=%s)",
            self.kind.value,
            interval_ms,
            self.always_on,
        )

    def start(self) -> None:
        if self._listener is None:
            raise SubscriptionError(self.kind.value, "start() before subscribe()")
        if self._active:
            return
        try:
            self._listener.start()
        except Exception as exc:
            raise SubscriptionError(self.kind.value, f"listener failed to start ({exc})") from exc
        self._active = True

    def stop(self) -> None:
        """Stop delivery. Safe to call repeatedly or before ``subscribe``."""
        if not self._active or self._listener is None:
            self._active = False
            return
        self._active = False
        try:
            self._listener.stop()
        except Exception:
            logger.exception("Failed to stop %s listener", self.kind.value)


def accelerometer_feed(platform: SensorPlatform, *, always_on: bool = True) -> SensorFeed:
    return SensorFeed(platform, SensorKind.ACCELEROMETER, always_on=always_on)


def gyroscope_feed(platform: SensorPlatform, *, always_on: bool = True) -> SensorFeed:
    return SensorFeed(platform, SensorKind.GYROSCOPE, always_on=always_on)
