# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Domain logic of the analytics pipeline.

This module contains:
- Domain models (AnalyticsEvent, EventType, EventResponse)
- The fluent event builder and canonical session/IP events
- The bounded in-memory event log
- The session manager (session lifecycle, counters, delivery hand-off)

Nothing here performs I/O directly; transports, device probes and timers are
injected through the ports in adpulse.base.
"""

from adpulse.core.builder import (
    AnalyticsEventBuilder,
    ip_changed_event,
    session_ended_event,
    session_started_event,
)
from adpulse.core.event_log import MAX_EVENTS_IN_MEMORY, BoundedEventLog
from adpulse.core.exceptions import (
    AnalyticsError,
    AnalyticsInitializationError,
    ClientClosedError,
    EventBuildError,
    ResponseDecodeError,
    TransportError,
)
from adpulse.core.models import AnalyticsEvent, EventResponse, EventType
from adpulse.core.session_manager import AnalyticsManager

__all__ = [
    "AnalyticsError",
    "AnalyticsEvent",
    "AnalyticsEventBuilder",
    "AnalyticsInitializationError",
    "AnalyticsManager",
    "BoundedEventLog",
    "ClientClosedError",
    "EventBuildError",
    "EventResponse",
    "EventType",
    "MAX_EVENTS_IN_MEMORY",
    "ResponseDecodeError",
    "TransportError",
    "ip_changed_event",
    "session_ended_event",
    "session_started_event",
]
