# ==============================================================================
# Host Lifecycle Observer Abstract Base Class
# ==============================================================================
"""
Abstract interface for host lifecycle signals.

The host application reports when its activities (screens, windows, views)
start, resume, pause and stop. The session manager subscribes as an observer
and maps those signals to session transitions.
"""

from abc import ABC, abstractmethod


class LifecycleObserver(ABC):
    """Receiver of activity lifecycle signals."""

    @abstractmethod
    def on_activity_started(self, activity: str) -> None:
        """An activity became visible."""
        ...

    @abstractmethod
    def on_activity_resumed(self, activity: str) -> None:
        """An activity gained focus and is interactive."""
        ...

    @abstractmethod
    def on_activity_paused(self, activity: str) -> None:
        """An activity lost focus."""
        ...

    @abstractmethod
    def on_activity_stopped(self, activity: str) -> None:
        """An activity is no longer visible."""
        ...


class LifecycleSource(ABC):
    """Something observers can subscribe to for lifecycle signals."""

    @abstractmethod
    def register_observer(self, observer: LifecycleObserver) -> None:
        """Start delivering signals to the observer."""
        ...

    @abstractmethod
    def unregister_observer(self, observer: LifecycleObserver) -> None:
        """Stop delivering signals to the observer."""
        ...
