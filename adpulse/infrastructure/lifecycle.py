# ==============================================================================
# Activity Lifecycle Registry
# ==============================================================================
"""
In-process LifecycleSource for hosts without a native lifecycle API.

The host calls activity_started / activity_resumed / activity_paused /
activity_stopped as its screens come and go; every registered observer
receives the signal in registration order.
"""

import logging
import threading

from adpulse.base.lifecycle import LifecycleObserver, LifecycleSource

logger = logging.getLogger(__name__)


class ActivityLifecycleRegistry(LifecycleSource):
    """Fans host activity signals out to registered observers."""

    def __init__(self):
        self._observers: list[LifecycleObserver] = []
        self._lock = threading.Lock()

    def register_observer(self, observer: LifecycleObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unregister_observer(self, observer: LifecycleObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def _dispatch(self, callback_name: str, activity: str) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                getattr(observer, callback_name)(activity)
            except Exception:
                logger.debug(
                    "Observer %r failed on %s(%s)", observer, callback_name, activity, exc_info=True
                )

    def activity_started(self, activity: str) -> None:
        self._dispatch("on_activity_started", activity)

    def activity_resumed(self, activity: str) -> None:
        self._dispatch("on_activity_resumed", activity)

    def activity_paused(self, activity: str) -> None:
        self._dispatch("on_activity_paused", activity)

    def activity_stopped(self, activity: str) -> None:
        self._dispatch("on_activity_stopped", activity)

    def enter_foreground(self, activity: str = "main") -> None:
        """Convenience: start and resume one activity."""
        self.activity_started(activity)
        self.activity_resumed(activity)

    def enter_background(self, activity: str = "main") -> None:
        """Convenience: pause and stop one activity."""
        self.activity_paused(activity)
        self.activity_stopped(activity)
