from __future__ import annotations

import logging
import queue
import threading
from typing import Protocol

from ..attendance.model import ScanOutcome

logger = logging.getLogger(__name__)


class AttendanceNotifier(Protocol):
    """Receives "attendance changed" events after a scan is recorded.

    Delivery is fire-and-forget: the scan outcome is already durable when
    this is called, and the service ignores any failure here.
    """

    def attendance_changed(self, outcome: ScanOutcome) -> None:
        raise NotImplementedError


class NullNotifier(AttendanceNotifier):
    def attendance_changed(self, outcome: ScanOutcome) -> None:
        return None


class AttendanceEventBroadcaster(AttendanceNotifier):
    """Fan-out to in-process subscribers (e.g. server-sent-event streams).

    Each subscriber gets a bounded queue; a subscriber that stops draining
    loses events instead of slowing scans down.
    """

    def __init__(self, *, max_pending: int = 100):
        self._max_pending = int(max_pending)
        self._lock = threading.Lock()
        self._subscribers: list[queue.Queue] = []

    def subscribe(self) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._max_pending)
        with self._lock:
            self._subscribers.append(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            if q in self._subscribers:
                self._subscribers.remove(q)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def attendance_changed(self, outcome: ScanOutcome) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        payload = outcome.to_dict()
        for q in subscribers:
            try:
                q.put_nowait(payload)
            except queue.Full:
                logger.debug("Dropping attendance event for a slow subscriber")
