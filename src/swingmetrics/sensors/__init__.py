"""Sensor feeds and platform backends.

:mod:`feed` defines the platform protocol and :class:`SensorFeed`;
:mod:`simulated` provides a threaded synthetic platform for desktops.
"""

from .feed import (
    SensorEvent,
    SensorFeed,
    SensorKind,
    SensorOption,
    SensorPlatform,
    accelerometer_feed,
    gyroscope_feed,
)

__all__ = [
    "SensorEvent",
    "SensorFeed",
    "SensorKind",
    "SensorOption",
    "SensorPlatform",
    "accelerometer_feed",
    "gyroscope_feed",
]
