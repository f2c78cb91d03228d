# ==============================================================================
# Network Address Monitor
# ==============================================================================
"""
Watches the host address and reports changes to the analytics pipeline.

Address checks are triggered by connectivity notifications (when the host
provides a ConnectivitySource) and by a periodic background check. The
current address is a single cell swapped under a lock, so two concurrent
checks can never both report a change from the same previous value.

On a change to a new address:
- NETWORK_CHANGE is tracked for every change to a non-empty address
- IP_CHANGED is tracked unless the previous address was empty
- The device context records every change, a loss ("") included; its
  session id rotates when the new address differs from the last non-empty
  address, so A -> lost -> B still starts a new session
"""

import logging
import threading
from collections.abc import Callable

from adpulse.base.connectivity import ConnectivityListener, ConnectivitySource
from adpulse.base.device_context import DeviceContextProvider
from adpulse.core.builder import AnalyticsEventBuilder, ip_changed_event
from adpulse.core.models import EventType
from adpulse.core.session_manager import AnalyticsManager
from adpulse.utils.network import active_network_type, is_public_ip, resolve_address

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 10.0  # seconds
NETWORK_SUBJECT = "network"


class NetworkMonitor(ConnectivityListener):
    """
    Tracks the current host address.

    Args:
        manager: Receives IP_CHANGED and NETWORK_CHANGE events
        device_context: Notified of address changes
        resolver: Returns the current address ("" when disconnected)
        connectivity: Optional source of connectivity notifications
        check_interval: Seconds between periodic checks; 0 disables them
        network_type: Returns the current network type for event metadata
    """

    def __init__(
        self,
        manager: AnalyticsManager,
        device_context: DeviceContextProvider,
        resolver: Callable[[], str] = resolve_address,
        connectivity: ConnectivitySource | None = None,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
        network_type: Callable[[], str] = active_network_type,
    ):
        self._manager = manager
        self._device_context = device_context
        self._resolver = resolver
        self._connectivity = connectivity
        self._check_interval = check_interval
        self._network_type = network_type

        self._current_ip = ""
        self._last_known_ip = ""
        self._ip_lock = threading.Lock()

        self._state_lock = threading.Lock()
        self._is_monitoring = False
        self._registered = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def current_ip(self) -> str:
        """The last resolved address ("" when disconnected or unknown)."""
        with self._ip_lock:
            return self._current_ip

    @property
    def is_monitoring(self) -> bool:
        return self._is_monitoring

    def _swap_ip(self, new_ip: str) -> tuple[str, str]:
        """
        Atomically replace the current address.

        Returns:
            Tuple of (previous address, last non-empty address before this one)
        """
        with self._ip_lock:
            old_ip, self._current_ip = self._current_ip, new_ip
            last_known = self._last_known_ip
            if new_ip:
                self._last_known_ip = new_ip
            return old_ip, last_known

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    def start(self) -> None:
        """
        Start monitoring. Does nothing if already monitoring.

        Registration failures are logged; the periodic check still runs.
        """
        with self._state_lock:
            if self._is_monitoring:
                return
            self._is_monitoring = True

            if self._connectivity is not None:
                try:
                    self._connectivity.register_listener(self)
                    self._registered = True
                except Exception:
                    logger.debug("Error starting network monitoring", exc_info=True)

            self._stop_event.clear()
            if self._check_interval > 0:
                self._thread = threading.Thread(
                    target=self._run_periodic_check, name="adpulse-network-monitor", daemon=True
                )
                self._thread.start()

        # Initial check
        self.check_ip_address()

    def stop(self) -> None:
        """Stop monitoring. Does nothing if not monitoring; never raises."""
        with self._state_lock:
            if not self._is_monitoring:
                return
            self._is_monitoring = False
            self._stop_event.set()

            if self._registered and self._connectivity is not None:
                try:
                    self._connectivity.unregister_listener(self)
                except Exception:
                    # Already unregistered
                    logger.debug("Error unregistering network listener", exc_info=True)
            self._registered = False

            thread, self._thread = self._thread, None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._check_interval + 1)

    def _run_periodic_check(self) -> None:
        while not self._stop_event.wait(self._check_interval):
            self.check_ip_address()

    # ------------------------------------------------------------------
    # ConnectivityListener
    # ------------------------------------------------------------------

    def on_available(self) -> None:
        self.check_ip_address()

    def on_link_properties_changed(self) -> None:
        self.check_ip_address()

    def on_lost(self) -> None:
        old_ip, _ = self._swap_ip("")
        if not old_ip:
            return
        try:
            self._on_ip_changed(old_ip, "")
            self._device_context.set_address("", rotate_session=False)
        except Exception:
            logger.debug("Error reporting lost network", exc_info=True)

    # ------------------------------------------------------------------
    # Address checks
    # ------------------------------------------------------------------

    def check_ip_address(self) -> None:
        """Re-resolve the address and report it if it changed. Never raises."""
        try:
            new_ip = self._resolver()
            old_ip, last_known = self._swap_ip(new_ip)
            if old_ip == new_ip:
                return

            # The very first resolution only records the address
            if old_ip:
                self._on_ip_changed(old_ip, new_ip)

            rotate = bool(new_ip) and bool(last_known) and new_ip != last_known
            self._device_context.set_address(new_ip, rotate_session=rotate)
            if new_ip:
                self._track_network_change(old_ip, new_ip)
        except Exception:
            logger.debug("Error checking IP address", exc_info=True)

    def _on_ip_changed(self, old_ip: str, new_ip: str) -> None:
        logger.info("IP address changed from %r to %r", old_ip, new_ip)
        self._manager.track(ip_changed_event(self._device_context, old_ip, new_ip))

    def _track_network_change(self, old_ip: str, new_ip: str) -> None:
        self._manager.track_builder(
            AnalyticsEventBuilder(self._device_context)
            .set_event_type(EventType.NETWORK_CHANGE)
            .set_ad_unit_id(NETWORK_SUBJECT)
            .add_metadata("ip_address", new_ip)
            .add_metadata("previous_ip", old_ip)
            .add_metadata("network_type", self._network_type())
            .add_metadata("is_public_ip", is_public_ip(new_ip))
        )
