# ==============================================================================
# Ad View
# ==============================================================================
"""
Thin wrapper around an ads-library AdUnit that forwards ad lifecycle
callbacks into the analytics pipeline.

Tracked events: AD_REQUESTED, AD_FAILED_TO_LOAD, AD_OPENED, AD_CLICKED,
AD_IMPRESSION, AD_CLOSED. Rendering and layout stay with the ads library.
"""

import logging
import threading
import time
from enum import Enum

from adpulse.base.ad_unit import AdUnit
from adpulse.core.models import EventType
from adpulse.core.session_manager import AnalyticsManager

logger = logging.getLogger(__name__)

# Test ad unit published by the ads library
DEFAULT_AD_UNIT_ID = "ca-app-pub-3940256099942544/6300978111"
DEFAULT_RELOAD_DELAY = 30.0  # seconds


class AdSize(Enum):
    """Supported banner sizes as (width, height); negative values are adaptive."""

    BANNER = (320, 50)
    LARGE_BANNER = (320, 100)
    MEDIUM_RECTANGLE = (300, 250)
    FULL_BANNER = (468, 60)
    LEADERBOARD = (728, 90)
    SMART_BANNER = (-1, -2)

    @property
    def width(self) -> int:
        return self.value[0]

    @property
    def height(self) -> int:
        return self.value[1]

    @classmethod
    def from_attribute(cls, value: int) -> "AdSize":
        """Map a layout attribute index to a size; unknown indexes give BANNER."""
        sizes = [
            cls.BANNER,
            cls.LARGE_BANNER,
            cls.MEDIUM_RECTANGLE,
            cls.FULL_BANNER,
            cls.LEADERBOARD,
            cls.SMART_BANNER,
        ]
        if 0 <= value < len(sizes):
            return sizes[value]
        return cls.BANNER


class AdView:
    """
    An ad slot bound to one ad unit id.

    The view registers itself as the ad unit's listener; callbacks from the
    ads library turn into tracked analytics events.
    """

    def __init__(
        self,
        manager: AnalyticsManager,
        ad_unit: AdUnit,
        ad_unit_id: str = DEFAULT_AD_UNIT_ID,
        ad_size: AdSize = AdSize.BANNER,
    ):
        self._manager = manager
        self._ad_unit = ad_unit
        self._ad_unit_id = ad_unit_id
        self._ad_size = ad_size
        self._is_loading = False
        self._impression_time: float = 0.0
        self._reload_timer: threading.Timer | None = None
        self._destroyed = False

        self._ad_unit.set_listener(self)

    @property
    def ad_unit_id(self) -> str:
        return self._ad_unit_id

    @property
    def ad_size(self) -> AdSize:
        return self._ad_size

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def set_ad_unit_id(self, ad_unit_id: str) -> None:
        """Switch to another ad unit and reload if the id changed."""
        if ad_unit_id == self._ad_unit_id:
            return
        self._ad_unit_id = ad_unit_id
        self._is_loading = False
        self.load_ad()

    def set_ad_size(self, ad_size: AdSize) -> None:
        """Change the ad size; takes effect on the next load."""
        self._ad_size = ad_size

    def load_ad(self) -> None:
        """Request an ad. Does nothing while a load is pending or without an ad unit id."""
        if self._destroyed or self._is_loading or not self._ad_unit_id.strip():
            return

        try:
            self._is_loading = True
            self._ad_unit.load(self._ad_unit_id, self._ad_size.width, self._ad_size.height)
            self._manager.track_event(EventType.AD_REQUESTED, self._ad_unit_id)
            logger.debug("Loading ad with unit ID: %s", self._ad_unit_id)
        except Exception as e:
            logger.error("Error loading ad: %s", e)
            self._is_loading = False

    def reload_ad(self, delay_seconds: float = DEFAULT_RELOAD_DELAY) -> None:
        """Load a new ad after a delay, replacing any pending reload."""
        if self._reload_timer is not None:
            self._reload_timer.cancel()
        self._reload_timer = threading.Timer(delay_seconds, self.load_ad)
        self._reload_timer.daemon = True
        self._reload_timer.start()

    def pause(self) -> None:
        self._ad_unit.pause()

    def resume(self) -> None:
        self._ad_unit.resume()

    def destroy(self) -> None:
        """Release the ad unit and cancel pending reloads."""
        if self._destroyed:
            return
        self._destroyed = True
        if self._reload_timer is not None:
            self._reload_timer.cancel()
            self._reload_timer = None
        self._ad_unit.set_listener(None)
        self._ad_unit.destroy()

    # ------------------------------------------------------------------
    # AdListener
    # ------------------------------------------------------------------

    def on_ad_loaded(self) -> None:
        logger.debug("Ad loaded successfully")
        self._is_loading = False

    def on_ad_failed_to_load(self, code: int, domain: str, message: str | None) -> None:
        logger.warning("Ad failed to load: %s", message)
        self._is_loading = False
        self._manager.track_event(
            EventType.AD_FAILED_TO_LOAD,
            self._ad_unit_id,
            {
                "error_code": code,
                "error_domain": domain,
                "error_message": message or "Unknown error",
            },
        )

    def on_ad_opened(self) -> None:
        self._manager.track_event(EventType.AD_OPENED, self._ad_unit_id)

    def on_ad_clicked(self) -> None:
        self._manager.track_event(EventType.AD_CLICKED, self._ad_unit_id)

    def on_ad_impression(self) -> None:
        self._impression_time = time.monotonic()
        self._manager.track_event(EventType.AD_IMPRESSION, self._ad_unit_id)

    def on_ad_closed(self) -> None:
        view_duration_ms = 0
        if self._impression_time > 0:
            view_duration_ms = int((time.monotonic() - self._impression_time) * 1000)
        self._impression_time = 0.0

        self._manager.track_event(
            EventType.AD_CLOSED,
            self._ad_unit_id,
            {
                "view_duration_ms": view_duration_ms,
                "view_duration_seconds": view_duration_ms / 1000.0,
            },
        )
