"""SwingMetrics: accelerometer + gyroscope session recorder.

The package is split the same way the data flows:
- :mod:`sensors` wraps the platform sensor framework into feeds.
- :mod:`core` owns the session state machine, event dispatch and buffer.
- :mod:`dataio` writes recordings to CSV and loads them back.
- :mod:`config` holds the typed runtime configuration.
"""

from .config import RecorderConfig, load_config
from .core.models import SampleRow, SessionState, StartReport, StopReport
from .core.recording_session import RecordingSession
from .core.session_buffer import SessionBuffer
from .dataio.csv_writer import CsvExporter
from .errors import BufferFull, ExportError, RecorderError, SensorUnavailable, SubscriptionError

__version__ = "0.3.0"

__all__ = [
    "BufferFull",
    "CsvExporter",
    "ExportError",
    "RecorderConfig",
    "RecorderError",
    "RecordingSession",
    "SampleRow",
    "SensorUnavailable",
    "SessionBuffer",
    "SessionState",
    "StartReport",
    "StopReport",
    "SubscriptionError",
    "load_config",
]
