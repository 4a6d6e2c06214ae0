"""Core recording path: samples, the session buffer and event dispatch.

The :class:`~swingmetrics.core.recording_session.RecordingSession` state
machine lives in :mod:`.recording_session`; it is re-exported from the
top-level :mod:`swingmetrics` package.
"""

from .dispatch import EventDispatcher
from .models import ROW_FIELDS, SampleRow, SessionState, StartReport, StopReport
from .session_buffer import DEFAULT_CAPACITY, SessionBuffer

__all__ = [
    "DEFAULT_CAPACITY",
    "EventDispatcher",
    "ROW_FIELDS",
    "SampleRow",
    "SessionBuffer",
    "SessionState",
    "StartReport",
    "StopReport",
]
