# ==============================================================================
# Event Sender Abstract Base Class
# ==============================================================================
"""
Abstract interface for handing events off to a remote collector.

Senders are fire-and-forget: send_event() returns immediately and delivery
failures never reach the caller.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adpulse.core.models import AnalyticsEvent


class EventSender(ABC):
    """Asynchronous, best-effort event delivery."""

    @abstractmethod
    def send_event(self, event: "AnalyticsEvent") -> Future | None:
        """
        Schedule delivery of one event.

        Returns:
            A future for the background task, or None if nothing was scheduled
        """
        ...

    @abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events and release transport resources."""
        ...
