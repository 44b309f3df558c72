from __future__ import annotations

import threading
from collections import deque
from typing import Any, Deque, List, Optional

from ..core.constants import MAX_ALERT_HISTORY
from .model import Alert


class TrackerState:
    """Process-wide alert, GPS and geofence cells.

    One instance per process, shared by all request handlers. Every method
    takes the same lock, so compound updates (set latest + prepend history,
    set flag + prepend history) are seen as a single step. Reads return
    snapshots. State is lost on restart.
    """

    def __init__(self, *, history_limit: int = MAX_ALERT_HISTORY):
        if int(history_limit) <= 0:
            raise ValueError("history_limit must be > 0")
        self._lock = threading.Lock()
        self._latest_alert: Optional[Alert] = None
        self._latest_gps: Any = None
        self._fence_breached = False
        # Newest on the left; appendleft drops the oldest from the right.
        self._history: Deque[Alert] = deque(maxlen=int(history_limit))

    @property
    def history_limit(self) -> int:
        return self._history.maxlen or 0

    def push_sos(self, alert: Alert) -> None:
        with self._lock:
            self._latest_alert = alert
            self._history.appendleft(alert)

    def push_breach(self, alert: Alert) -> None:
        with self._lock:
            self._fence_breached = True
            self._history.appendleft(alert)

    def latest_alert(self) -> Optional[Alert]:
        with self._lock:
            return self._latest_alert

    def clear_alert(self) -> None:
        with self._lock:
            self._latest_alert = None

    def fence_breached(self) -> bool:
        with self._lock:
            return self._fence_breached

    def clear_fence(self) -> None:
        with self._lock:
            self._fence_breached = False

    def set_gps(self, payload: Any) -> None:
        with self._lock:
            self._latest_gps = payload

    def latest_gps(self) -> Any:
        with self._lock:
            return self._latest_gps

    def history(self) -> List[Alert]:
        with self._lock:
            return list(self._history)

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()
