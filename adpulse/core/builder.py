# ==============================================================================
# Analytics Event Builder
# ==============================================================================
"""
Fluent construction of AnalyticsEvent instances.

The builder composes device, network and locale snapshots from a
DeviceContextProvider with event-specific metadata, and stamps the event with
the session id and time at build().
"""

from typing import Any

from adpulse.base.device_context import DeviceContextProvider
from adpulse.core.exceptions import EventBuildError
from adpulse.core.models import AnalyticsEvent, EventType, now_ms

SESSION_SUBJECT = "session"


class AnalyticsEventBuilder:
    """
    Builder for AnalyticsEvent.

    Every setter returns the builder so calls can be chained:

        event = (
            AnalyticsEventBuilder(context)
            .set_event_type(EventType.AD_CLICKED)
            .set_ad_unit_id("unit1")
            .add_metadata("x", 1)
            .build()
        )

    Snapshots are included by default; use the with_* methods to leave
    one out.
    """

    def __init__(self, context: DeviceContextProvider):
        self._context = context
        self._event_type: EventType | None = None
        self._ad_unit_id = ""
        self._metadata: dict[str, Any] = {}
        self._include_device_info = True
        self._include_network_info = True
        self._include_locale_info = True

    def set_event_type(self, event_type: EventType | str) -> "AnalyticsEventBuilder":
        self._event_type = EventType(event_type)
        return self

    def set_ad_unit_id(self, ad_unit_id: str) -> "AnalyticsEventBuilder":
        self._ad_unit_id = ad_unit_id
        return self

    def add_metadata(self, key: str, value: Any) -> "AnalyticsEventBuilder":
        self._metadata[key] = value
        return self

    def add_all_metadata(self, metadata: dict[str, Any] | None) -> "AnalyticsEventBuilder":
        for key, value in (metadata or {}).items():
            self._metadata[key] = value
        return self

    def with_device_info(self, include: bool = True) -> "AnalyticsEventBuilder":
        self._include_device_info = include
        return self

    def with_network_info(self, include: bool = True) -> "AnalyticsEventBuilder":
        self._include_network_info = include
        return self

    def with_locale_info(self, include: bool = True) -> "AnalyticsEventBuilder":
        self._include_locale_info = include
        return self

    def build(self) -> AnalyticsEvent:
        """
        Create the event from the accumulated state.

        Raises:
            EventBuildError: If no event type was set
        """
        if self._event_type is None:
            raise EventBuildError("Event type is required")

        context = self._context
        return AnalyticsEvent(
            event_type=self._event_type,
            ad_unit_id=self._ad_unit_id,
            timestamp=now_ms(),
            session_id=context.get_session_id(),
            device_info=context.get_device_info() if self._include_device_info else {},
            network_info=context.get_network_info() if self._include_network_info else {},
            locale_info=context.get_locale_info() if self._include_locale_info else {},
            metadata=dict(self._metadata),
        )


# ==============================================================================
# Canonical Events
# ==============================================================================


def session_started_event(context: DeviceContextProvider) -> AnalyticsEvent:
    """Create a SESSION_STARTED event with all snapshots."""
    return (
        AnalyticsEventBuilder(context)
        .set_event_type(EventType.SESSION_STARTED)
        .set_ad_unit_id(SESSION_SUBJECT)
        .build()
    )


def session_ended_event(
    context: DeviceContextProvider, metrics: dict[str, Any] | None = None
) -> AnalyticsEvent:
    """Create a SESSION_ENDED event, optionally carrying session metrics."""
    return (
        AnalyticsEventBuilder(context)
        .set_event_type(EventType.SESSION_ENDED)
        .set_ad_unit_id(SESSION_SUBJECT)
        .add_all_metadata(metrics)
        .build()
    )


def ip_changed_event(context: DeviceContextProvider, old_ip: str, new_ip: str) -> AnalyticsEvent:
    """Create an IP_CHANGED event recording both addresses."""
    return (
        AnalyticsEventBuilder(context)
        .set_event_type(EventType.IP_CHANGED)
        .set_ad_unit_id(SESSION_SUBJECT)
        .add_metadata("old_ip", old_ip)
        .add_metadata("new_ip", new_ip)
        .build()
    )
