# ==============================================================================
# Pipeline Factory
# ==============================================================================
"""
Wires the analytics pipeline from settings.

Hosts that do not need custom adapters can call create_analytics_manager()
and create_network_monitor() instead of assembling the pieces by hand.
"""

from functools import partial

from adpulse.base.connectivity import ConnectivitySource
from adpulse.base.device_context import DeviceContextProvider
from adpulse.core.session_manager import AnalyticsManager
from adpulse.infrastructure.delivery import AnalyticsApiClient
from adpulse.infrastructure.device_info import HostDeviceContext
from adpulse.infrastructure.http import RequestsTransport
from adpulse.infrastructure.network_monitor import NetworkMonitor
from adpulse.utils.config import CollectorSettings, Settings, get_settings
from adpulse.utils.network import resolve_address


def create_api_client(settings: CollectorSettings) -> AnalyticsApiClient:
    """Create a delivery client for the configured collector."""
    transport = RequestsTransport(
        settings.base_url,
        connect_timeout=settings.connect_timeout_seconds,
        read_timeout=settings.read_timeout_seconds,
    )
    return AnalyticsApiClient(
        transport, endpoint=settings.endpoint, max_workers=settings.max_workers
    )


def create_analytics_manager(
    settings: Settings | None = None,
    device_context: DeviceContextProvider | None = None,
) -> AnalyticsManager:
    """
    Create an (uninitialized) analytics manager.

    Args:
        settings: Application settings (defaults to get_settings())
        device_context: Device context (defaults to a HostDeviceContext)

    Returns:
        AnalyticsManager; delivery is disabled when the collector is disabled
    """
    settings = settings or get_settings()
    collector = settings.collector

    return AnalyticsManager(
        device_context or HostDeviceContext(),
        client_factory=partial(create_api_client, collector) if collector.enabled else None,
        max_events=settings.session.max_events_in_memory,
        session_timeout_seconds=settings.session.timeout_seconds,
    )


def create_network_monitor(
    manager: AnalyticsManager,
    device_context: DeviceContextProvider,
    settings: Settings | None = None,
    connectivity: ConnectivitySource | None = None,
) -> NetworkMonitor:
    """Create a network monitor reporting into the given manager."""
    settings = settings or get_settings()
    network = settings.network
    services = network.public_ip_services if network.public_ip_lookup else None

    return NetworkMonitor(
        manager,
        device_context,
        resolver=partial(
            resolve_address,
            public_ip_services=services,
            lookup_timeout=network.lookup_timeout_seconds,
        ),
        connectivity=connectivity,
        check_interval=network.check_interval_seconds,
    )
