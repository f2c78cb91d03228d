# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the ports of the analytics pipeline.

The session manager and its collaborators depend only on these interfaces;
concrete adapters live in adpulse.infrastructure and can be swapped by hosts
(or by tests).
"""

from adpulse.base.ad_unit import AdListener, AdUnit
from adpulse.base.connectivity import ConnectivityListener, ConnectivitySource
from adpulse.base.delivery import EventSender
from adpulse.base.device_context import DeviceContextProvider
from adpulse.base.lifecycle import LifecycleObserver, LifecycleSource
from adpulse.base.transport import Transport

__all__ = [
    "AdListener",
    "AdUnit",
    "ConnectivityListener",
    "ConnectivitySource",
    "DeviceContextProvider",
    "EventSender",
    "LifecycleObserver",
    "LifecycleSource",
    "Transport",
]
