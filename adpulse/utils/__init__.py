# ==============================================================================
# Pipeline Utilities
# ==============================================================================
"""
Shared utilities for the analytics pipeline.

This module exports configuration and network helpers for use throughout
the pipeline.
"""

from adpulse.utils.config import (
    CollectorSettings,
    NetworkSettings,
    SessionSettings,
    Settings,
    get_settings,
)
from adpulse.utils.network import (
    InterfaceAddress,
    is_public_ip,
    list_interface_addresses,
    resolve_address,
)

__all__ = [
    # Config
    "CollectorSettings",
    "NetworkSettings",
    "SessionSettings",
    "Settings",
    "get_settings",
    # Network
    "InterfaceAddress",
    "is_public_ip",
    "list_interface_addresses",
    "resolve_address",
]
