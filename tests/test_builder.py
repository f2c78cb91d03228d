# ==============================================================================
# Tests for AnalyticsEventBuilder
# ==============================================================================
"""
Tests for fluent event construction and the canonical session events.
"""

import pytest

from adpulse.core.builder import (
    AnalyticsEventBuilder,
    ip_changed_event,
    session_ended_event,
    session_started_event,
)
from adpulse.core.exceptions import EventBuildError
from adpulse.core.models import EventType


class TestBuild:
    """Tests for AnalyticsEventBuilder.build()."""

    def test_round_trip_of_fields(self, device_context):
        """Type, ad unit and metadata come out exactly as set."""
        event = (
            AnalyticsEventBuilder(device_context)
            .set_event_type(EventType.AD_CLICKED)
            .set_ad_unit_id("unit1")
            .add_metadata("x", 1)
            .build()
        )

        assert event.event_type is EventType.AD_CLICKED
        assert event.ad_unit_id == "unit1"
        assert event.metadata == {"x": 1}
        assert event.session_id == "session-1"

    def test_missing_type_raises(self, device_context):
        """build() without an event type fails."""
        with pytest.raises(EventBuildError, match="Event type is required"):
            AnalyticsEventBuilder(device_context).set_ad_unit_id("unit1").build()

    def test_snapshots_included_by_default(self, device_context):
        event = AnalyticsEventBuilder(device_context).set_event_type("AD_OPENED").build()

        assert event.device_info == device_context.get_device_info()
        assert event.network_info == device_context.get_network_info()
        assert event.locale_info == device_context.get_locale_info()

    def test_snapshots_can_be_excluded(self, device_context):
        """Excluded snapshots are empty mappings, not missing."""
        event = (
            AnalyticsEventBuilder(device_context)
            .set_event_type(EventType.AD_OPENED)
            .with_device_info(False)
            .with_network_info(False)
            .with_locale_info(False)
            .build()
        )

        assert event.device_info == {}
        assert event.network_info == {}
        assert event.locale_info == {}

    def test_add_all_metadata_merges(self, device_context):
        """Later keys overwrite earlier ones; None is accepted."""
        event = (
            AnalyticsEventBuilder(device_context)
            .set_event_type(EventType.AD_CLOSED)
            .add_metadata("a", 1)
            .add_all_metadata({"a": 2, "b": 3})
            .add_all_metadata(None)
            .build()
        )
        assert event.metadata == {"a": 2, "b": 3}

    def test_built_events_do_not_share_metadata(self, device_context):
        """Changing the builder after build() leaves the event untouched."""
        builder = AnalyticsEventBuilder(device_context).set_event_type(EventType.AD_CLOSED)
        first = builder.add_metadata("a", 1).build()
        builder.add_metadata("b", 2)

        assert first.metadata == {"a": 1}

    def test_unknown_type_name_raises(self, device_context):
        with pytest.raises(ValueError):
            AnalyticsEventBuilder(device_context).set_event_type("NOT_A_TYPE")

    def test_session_id_taken_at_build(self, device_context):
        """The session id is read when build() runs, not when the builder is created."""
        builder = AnalyticsEventBuilder(device_context).set_event_type(EventType.AD_OPENED)
        device_context.generate_new_session_id()

        assert builder.build().session_id == "session-2"


class TestCanonicalEvents:
    """Tests for the session and network event helpers."""

    def test_session_started(self, device_context):
        event = session_started_event(device_context)
        assert event.event_type is EventType.SESSION_STARTED
        assert event.ad_unit_id == "session"

    def test_session_ended_with_metrics(self, device_context):
        event = session_ended_event(device_context, {"ad_clicks": 2})
        assert event.event_type is EventType.SESSION_ENDED
        assert event.metadata == {"ad_clicks": 2}

    def test_ip_changed(self, device_context):
        """IP_CHANGED records the old and new address."""
        event = ip_changed_event(device_context, "1.2.3.4", "5.6.7.8")
        assert event.event_type is EventType.IP_CHANGED
        assert event.metadata == {"old_ip": "1.2.3.4", "new_ip": "5.6.7.8"}
