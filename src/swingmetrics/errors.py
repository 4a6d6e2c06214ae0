"""Exception types raised by the recorder core."""

from __future__ import annotations

from typing import Optional


class RecorderError(Exception):
    """Base class for every error raised by :mod:`swingmetrics`."""


class SensorUnavailable(RecorderError):
    """The requested sensor kind is unsupported or has no default sensor."""

    def __init__(self, kind: object, reason: str = "not supported") -> None:
        super().__init__(f"{kind} sensor unavailable: {reason}")
        self.kind = kind
        self.reason = reason


class SubscriptionError(RecorderError):
    """The platform refused to register event delivery for a sensor."""

    def __init__(self, kind: object, reason: str) -> None:
        super().__init__(f"could not subscribe to {kind}: {reason}")
        self.kind = kind
        self.reason = reason


class BufferFull(RecorderError):
    """A channel write cursor reached the buffer capacity."""

    def __init__(self, channel: str, capacity: int) -> None:
        super().__init__(f"{channel} buffer full ({capacity} rows)")
        self.channel = channel
        self.capacity = capacity


class ExportError(RecorderError, OSError):
    """Writing a recording to disk failed."""

    def __init__(self, destination: object, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to export recording to {destination}{detail}")
        self.destination = destination
