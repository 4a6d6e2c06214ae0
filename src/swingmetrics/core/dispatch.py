"""
Single-owner event dispatch for sensor callbacks.

Platform listeners may call back from their own threads. Rather than locking
the session buffer, every callback only posts its :class:`SensorEvent` here
and one worker thread hands the events to the handler one at a time.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Literal, Optional

from ..sensors.feed import SensorEvent

logger = logging.getLogger(__name__)

DispatchMode = Literal["queue", "inline"]
EventHandler = Callable[[SensorEvent], None]

_STOP = object()


class EventDispatcher:
    """Serialize sensor events into ``handler``.

    ``mode="queue"`` (default) runs a worker thread fed by a FIFO queue.
    ``mode="inline"`` calls ``handler`` on the posting thread under a lock,
    which suits platforms that already deliver on one dispatch thread.

    Events posted while the dispatcher is closed are dropped.
    """

    def __init__(self, handler: EventHandler, *, mode: DispatchMode = "queue", name: str = "SwingMetricsDispatch") -> None:
        if mode not in ("queue", "inline"):
            raise ValueError(f"unknown dispatch mode {mode!r}")
        self._handler = handler
        self._mode = mode
        self._name = name
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.RLock()
        self._open = False
        self._thread: Optional[threading.Thread] = None
        self.dropped = 0

    @property
    def mode(self) -> DispatchMode:
        return self._mode

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        with self._lock:
            if self._open:
                return
            self.dropped = 0
            self._open = True
            if self._mode == "queue":
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()

    def post(self, event: SensorEvent) -> None:
        """Entry point for listener callbacks; never raises into the platform."""
        with self._lock:
            if not self._open:
                self.dropped += 1
                return
            if self._mode == "inline":
                self._deliver(event)
            else:
                self._queue.put(event)

    def wait_idle(self) -> None:
        """Block until every queued event has been handled."""
        if self._mode == "queue":
            self._queue.join()

    def close(self) -> None:
        """Refuse new events, finish the queued ones and stop the worker."""
        with self._lock:
            if not self._open:
                return
            self._open = False
            thread = self._thread
            self._thread = None
            if thread is not None:
                self._queue.put(_STOP)
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join()
        if self.dropped:
            logger.debug("Dropped %d events posted after close", self.dropped)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    # Sentinel pushed by close(): everything before it is handled.
                    break
                self._deliver(item)  # type: ignore[arg-type]
            finally:
                self._queue.task_done()

    def _deliver(self, event: SensorEvent) -> None:
        try:
            self._handler(event)
        except Exception:
            logger.exception("Handler failed for %s event", event.kind.value)
