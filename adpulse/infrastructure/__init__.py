# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Concrete adapters for the ports defined in adpulse.base.
"""

from adpulse.infrastructure.ad_view import AdSize, AdView
from adpulse.infrastructure.delivery import AnalyticsApiClient
from adpulse.infrastructure.device_info import HostDeviceContext
from adpulse.infrastructure.factory import (
    create_analytics_manager,
    create_api_client,
    create_network_monitor,
)
from adpulse.infrastructure.http import RequestsTransport
from adpulse.infrastructure.lifecycle import ActivityLifecycleRegistry
from adpulse.infrastructure.network_monitor import NetworkMonitor

__all__ = [
    "ActivityLifecycleRegistry",
    "AdSize",
    "AdView",
    "AnalyticsApiClient",
    "HostDeviceContext",
    "NetworkMonitor",
    "RequestsTransport",
    "create_analytics_manager",
    "create_api_client",
    "create_network_monitor",
]
