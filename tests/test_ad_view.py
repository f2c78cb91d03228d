# ==============================================================================
# Tests for AdView
# ==============================================================================
"""
Tests for the ad slot wrapper that turns ad lifecycle callbacks into
analytics events. The ads library is a MagicMock AdUnit.
"""

import threading
from unittest.mock import MagicMock

import pytest

from adpulse.base.ad_unit import AdUnit
from adpulse.core.models import EventType
from adpulse.infrastructure.ad_view import DEFAULT_AD_UNIT_ID, AdSize, AdView


@pytest.fixture()
def ad_unit():
    return MagicMock(spec=AdUnit)


@pytest.fixture()
def view(manager, ad_unit):
    manager.initialize()
    return AdView(manager, ad_unit, ad_unit_id="unit1")


def _ad_events(manager):
    return [
        event
        for event in manager.get_events()
        if event.event_type.value.startswith("AD_")
    ]


class TestAdSize:
    """Tests for AdSize."""

    def test_dimensions(self):
        assert (AdSize.MEDIUM_RECTANGLE.width, AdSize.MEDIUM_RECTANGLE.height) == (300, 250)

    @pytest.mark.parametrize(
        "index,expected",
        [(0, AdSize.BANNER), (2, AdSize.MEDIUM_RECTANGLE), (5, AdSize.SMART_BANNER)],
    )
    def test_from_attribute(self, index, expected):
        assert AdSize.from_attribute(index) is expected

    @pytest.mark.parametrize("index", [-1, 6, 99])
    def test_unknown_attribute_is_banner(self, index):
        assert AdSize.from_attribute(index) is AdSize.BANNER


class TestLoading:
    """Tests for load_ad() and friends."""

    def test_registers_as_listener(self, view, ad_unit):
        ad_unit.set_listener.assert_called_once_with(view)

    def test_default_ad_unit_id(self, manager, ad_unit):
        assert AdView(manager, ad_unit).ad_unit_id == DEFAULT_AD_UNIT_ID

    def test_load_requests_ad_and_tracks(self, view, ad_unit, manager):
        """load_ad() asks the ad unit for an ad and records AD_REQUESTED."""
        view.load_ad()

        ad_unit.load.assert_called_once_with("unit1", 320, 50)
        events = _ad_events(manager)
        assert [e.event_type for e in events] == [EventType.AD_REQUESTED]
        assert events[0].ad_unit_id == "unit1"
        assert view.is_loading

    def test_no_second_load_while_pending(self, view, ad_unit):
        view.load_ad()
        view.load_ad()
        assert ad_unit.load.call_count == 1

    def test_load_again_after_loaded(self, view, ad_unit):
        view.load_ad()
        view.on_ad_loaded()
        view.load_ad()
        assert ad_unit.load.call_count == 2

    def test_blank_ad_unit_id_is_ignored(self, manager, ad_unit):
        manager.initialize()
        view = AdView(manager, ad_unit, ad_unit_id="  ")
        view.load_ad()
        ad_unit.load.assert_not_called()

    def test_load_failure_is_logged_not_raised(self, view, ad_unit, manager):
        ad_unit.load.side_effect = RuntimeError("library not initialized")

        view.load_ad()

        assert not view.is_loading
        assert _ad_events(manager) == []

    def test_uses_ad_size(self, view, ad_unit):
        view.set_ad_size(AdSize.LEADERBOARD)
        view.load_ad()
        ad_unit.load.assert_called_once_with("unit1", 728, 90)

    def test_changing_ad_unit_id_reloads(self, view, ad_unit):
        view.load_ad()
        view.set_ad_unit_id("unit1")
        view.set_ad_unit_id("unit2")

        assert ad_unit.load.call_count == 2
        ad_unit.load.assert_called_with("unit2", 320, 50)

    def test_reload_after_delay(self, view, ad_unit):
        loaded = threading.Event()
        ad_unit.load.side_effect = lambda *args: loaded.set()

        view.reload_ad(delay_seconds=0.01)

        assert loaded.wait(timeout=5)

    def test_pause_and_resume_forwarded(self, view, ad_unit):
        view.pause()
        view.resume()
        ad_unit.pause.assert_called_once()
        ad_unit.resume.assert_called_once()

    def test_destroy(self, view, ad_unit):
        """destroy() releases the unit once; later loads do nothing."""
        view.destroy()
        view.destroy()
        view.load_ad()

        ad_unit.destroy.assert_called_once()
        ad_unit.set_listener.assert_called_with(None)
        ad_unit.load.assert_not_called()


class TestListenerCallbacks:
    """Tests for ad lifecycle callbacks."""

    def test_failed_to_load_metadata(self, view, manager):
        view.load_ad()
        view.on_ad_failed_to_load(3, "com.google.android.gms.ads", "No fill")

        event = _ad_events(manager)[-1]
        assert event.event_type is EventType.AD_FAILED_TO_LOAD
        assert event.metadata == {
            "error_code": 3,
            "error_domain": "com.google.android.gms.ads",
            "error_message": "No fill",
        }
        assert not view.is_loading

    def test_failed_to_load_without_message(self, view, manager):
        view.on_ad_failed_to_load(0, "ads", None)
        assert _ad_events(manager)[-1].metadata["error_message"] == "Unknown error"

    def test_click_sequence(self, view, manager):
        """Impression, click, open and close are each tracked."""
        view.on_ad_impression()
        view.on_ad_clicked()
        view.on_ad_opened()
        view.on_ad_closed()

        assert [e.event_type for e in _ad_events(manager)] == [
            EventType.AD_IMPRESSION,
            EventType.AD_CLICKED,
            EventType.AD_OPENED,
            EventType.AD_CLOSED,
        ]
        assert manager.ad_clicks_this_session == 1
        assert manager.ad_impressions_this_session == 1

    def test_close_reports_view_duration(self, view, manager):
        view.on_ad_impression()
        view.on_ad_closed()

        metadata = _ad_events(manager)[-1].metadata
        assert metadata["view_duration_ms"] >= 0
        assert metadata["view_duration_seconds"] == metadata["view_duration_ms"] / 1000.0

    def test_close_without_impression(self, view, manager):
        view.on_ad_closed()
        assert _ad_events(manager)[-1].metadata == {
            "view_duration_ms": 0,
            "view_duration_seconds": 0.0,
        }
