"""Start/stop state machine tying the sensor feeds to the session buffer."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config.runtime import RecorderConfig
from ..dataio import file_paths
from ..dataio.csv_writer import CsvExporter
from ..errors import BufferFull, ExportError, SensorUnavailable, SubscriptionError
from ..sensors.feed import SensorEvent, SensorFeed, SensorKind, SensorPlatform
from .dispatch import EventDispatcher
from .models import SessionState, StartReport, StopReport
from .session_buffer import SessionBuffer

logger = logging.getLogger(__name__)

OverflowCallback = Callable[[SensorKind], None]


class RecordingSession:
    """
    Own one accelerometer feed, one gyroscope feed and their shared buffer.

    ``start()`` and ``stop()`` are the only transitions between
    :attr:`SessionState.IDLE` and :attr:`SessionState.RECORDING`; calling
    either from the wrong state is a logged no-op returning ``None``.

    Rows are paced by the gyroscope: each accelerometer event stamps and fills
    the next accelerometer row, each gyroscope event fills the gyroscope
    columns of the next gyroscope row, and the export length is the gyroscope
    cursor. A row whose accelerometer half never arrived is exported with
    zeroed ``t``/accelerometer fields.
    """

    def __init__(
        self,
        platform: SensorPlatform,
        config: RecorderConfig | None = None,
        *,
        exporter: CsvExporter | None = None,
        on_overflow: OverflowCallback | None = None,
    ) -> None:
        self.config = (config or RecorderConfig()).sanitized()
        self.buffer = SessionBuffer(self.config.capacity)
        self.exporter = exporter or CsvExporter(
            self.config.float_format,
            self.config.delimiter,
            legacy_trailing_comma=self.config.legacy_trailing_comma,
        )
        self.on_overflow = on_overflow
        self.feeds: Dict[SensorKind, SensorFeed] = {
            kind: SensorFeed(platform, kind, always_on=self.config.always_on)
            for kind in (SensorKind.ACCELEROMETER, SensorKind.GYROSCOPE)
        }
        self._dispatcher = EventDispatcher(self._handle_event, mode=self.config.dispatch_mode)  # type: ignore[arg-type]
        self._transition_lock = threading.Lock()
        self._state = SessionState.IDLE

        self._elapsed = 0.0
        self._first_accel_ns: Optional[int] = None
        self._active: List[SensorKind] = []
        self._overflowed: List[SensorKind] = []
        self._started_at: Optional[datetime] = None
        self._last_report: Optional[StopReport] = None

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is SessionState.RECORDING

    @property
    def destination(self) -> Path:
        return self.config.output_path or file_paths.default_output_path()

    @property
    def last_report(self) -> Optional[StopReport]:
        return self._last_report

    # ---------------------------------------------------------------- control
    def start(self) -> StartReport | None:
        """Open and subscribe both feeds, then begin capturing.

        Sensor problems never raise here: they are collected in the returned
        :class:`StartReport`. Without ``allow_partial_capture`` any failing
        channel keeps the session idle.
        """
        with self._transition_lock:
            if self._state is SessionState.RECORDING:
                logger.warning("start() ignored: session already recording")
                return None

            report = StartReport(started=False)
            opened: List[SensorKind] = []
            for kind, feed in self.feeds.items():
                try:
                    feed.open()
                except SensorUnavailable as exc:
                    logger.warning("%s", exc)
                    report.errors[kind.value] = exc
                else:
                    opened.append(kind)

            if not self._may_record(opened, report):
                return report

            for kind in opened:
                feed = self.feeds[kind]
                try:
                    feed.subscribe(self.config.interval_ms, self._dispatcher.post)
                except SubscriptionError as exc:
                    logger.warning("%s", exc)
                    report.errors[kind.value] = exc
                    continue
                report.active.append(kind.value)

            active = [SensorKind(name) for name in report.active]
            if not self._may_record(active, report):
                return report

            # Events posted before the dispatcher opens are dropped, so a
            # failed start leaves the retained buffer and report untouched.
            for kind in active:
                try:
                    self.feeds[kind].start()
                except SubscriptionError as exc:
                    logger.warning("%s", exc)
                    report.errors[kind.value] = exc
                    report.active.remove(kind.value)

            active = [SensorKind(name) for name in report.active]
            if not self._may_record(active, report):
                self._stop_feeds()
                return report

            self.buffer.reset()
            self._last_report = None
            self._elapsed = 0.0
            self._first_accel_ns = None
            self._overflowed = []
            self._dispatcher.open()

            self._active = active
            self._started_at = datetime.now()
            self._state = SessionState.RECORDING
            report.started = True
            if report.degraded:
                logger.warning("Recording with degraded capability: %s", ", ".join(report.active))
            else:
                logger.info("Recording started (%d ms interval)", self.config.interval_ms)
            return report

    def stop(self) -> StopReport | None:
        """Stop capture and export the buffer.

        Feeds are stopped and pending events drained before the snapshot is
        taken, so the export sees a quiesced buffer. The session is idle when
        this returns or raises; on :class:`ExportError` the buffer is kept and
        :meth:`export_last` can retry.
        """
        with self._transition_lock:
            if self._state is SessionState.IDLE:
                logger.debug("stop() ignored: session idle")
                return None

            self._stop_feeds()
            self._dispatcher.close()
            self._state = SessionState.IDLE

            report = StopReport(
                rows_exported=0,
                destination=None,
                accel_count=self.buffer.accel_index,
                gyro_count=self.buffer.gyro_index,
                overflowed=[kind.value for kind in self._overflowed],
                started_at=self._started_at,
                stopped_at=datetime.now(),
            )
            self._last_report = report
            logger.info(
                "Recording stopped: %d accelerometer / %d gyroscope samples",
                report.accel_count,
                report.gyro_count,
            )
            return self._export(report, self.destination)

    def toggle(self) -> StartReport | StopReport | None:
        """Start when idle, stop when recording (the UI button behaviour)."""
        if self.is_recording:
            return self.stop()
        return self.start()

    def export_last(self, destination: Path | str | None = None) -> StopReport:
        """Export the retained buffer again, e.g. after a failed ``stop()``."""
        with self._transition_lock:
            if self._state is SessionState.RECORDING:
                raise RuntimeError("export_last() while recording; call stop() first")
            if self._last_report is None:
                raise RuntimeError("no finished session to export")
            target = Path(destination) if destination is not None else self.destination
            return self._export(self._last_report, target)

    def wait_idle(self) -> None:
        """Block until every event delivered so far has reached the buffer."""
        self._dispatcher.wait_idle()

    # Control surface used by the UI glue.
    start_session = start
    stop_session = stop
    toggle_session = toggle

    # ---------------------------------------------------------------- helpers
    def _may_record(self, kinds: List[SensorKind], report: StartReport) -> bool:
        if not kinds:
            logger.error("No sensor channel available; session not started")
            return False
        if report.errors and not self.config.allow_partial_capture:
            logger.error(
                "Session not started: %s unavailable and partial capture is disabled",
                ", ".join(report.errors),
            )
            return False
        return True

    def _pacing(self) -> str:
        if SensorKind.GYROSCOPE in self._active:
            return "gyro"
        return "accel"

    def _export(self, report: StopReport, destination: Path) -> StopReport:
        rows = self.buffer.snapshot_for_export(self._pacing())  # type: ignore[arg-type]
        try:
            report.rows_exported = self.exporter.export(rows, destination)
        except ExportError:
            logger.error("Keeping %d rows in memory for a later export_last()", rows.shape[0])
            raise
        report.destination = Path(destination)
        return report

    def _stop_feeds(self) -> None:
        for feed in self.feeds.values():
            feed.stop()

    def _handle_event(self, event: SensorEvent) -> None:
        """Runs on the dispatcher: the only code that writes the buffer."""
        kind = event.kind
        if kind in self._overflowed:
            return
        x, y, z = event.values
        try:
            if kind is SensorKind.ACCELEROMETER:
                self.buffer.write_accel(self._next_timestamp(event), x, y, z)
            else:
                self.buffer.write_gyro(x, y, z)
        except BufferFull as exc:
            self._on_buffer_full(kind, exc)

    def _next_timestamp(self, event: SensorEvent) -> float:
        if self.config.timestamp_mode == "monotonic":
            if self._first_accel_ns is None:
                self._first_accel_ns = event.timestamp_ns
            return (event.timestamp_ns - self._first_accel_ns) / 1e9
        t = self._elapsed
        self._elapsed += self.config.interval_seconds
        return t

    def _on_buffer_full(self, kind: SensorKind, exc: BufferFull) -> None:
        logger.warning("%s; further %s samples are dropped", exc, kind.value)
        self._overflowed.append(kind)
        if self.config.overflow_policy == "auto_stop":
            logger.warning("Capture halted on overflow; waiting for stop() to export")
            self._stop_feeds()
        else:
            self.feeds[kind].stop()
        if self.on_overflow is not None:
            try:
                self.on_overflow(kind)
            except Exception:
                logger.exception("on_overflow callback failed")
