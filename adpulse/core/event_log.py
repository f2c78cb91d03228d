# ==============================================================================
# Bounded Event Log
# ==============================================================================
"""
Thread-safe, append-only, bounded buffer of analytics events.

Appends and snapshot reads share one lock, so readers never observe a
partially applied append. When the log is full the oldest entry is evicted.
"""

import threading
from collections import deque
from collections.abc import Iterable

from adpulse.core.models import AnalyticsEvent

MAX_EVENTS_IN_MEMORY = 1000


class BoundedEventLog:
    """FIFO event buffer holding at most ``max_events`` entries."""

    def __init__(self, max_events: int = MAX_EVENTS_IN_MEMORY):
        if max_events <= 0:
            raise ValueError(f"max_events must be positive, got {max_events}")
        self._max_events = max_events
        self._events: deque[AnalyticsEvent] = deque()
        self._lock = threading.Lock()

    @property
    def max_events(self) -> int:
        return self._max_events

    def append(self, event: AnalyticsEvent) -> None:
        """Append an event, evicting the oldest entries beyond capacity."""
        with self._lock:
            self._events.append(event)
            while len(self._events) > self._max_events:
                self._events.popleft()

    def extend(self, events: Iterable[AnalyticsEvent]) -> None:
        for event in events:
            self.append(event)

    def snapshot(self) -> list[AnalyticsEvent]:
        """Return a copy of the log in append order."""
        with self._lock:
            return list(self._events)

    def drain(self) -> list[AnalyticsEvent]:
        """Remove and return every buffered event."""
        with self._lock:
            events = list(self._events)
            self._events.clear()
            return events

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
