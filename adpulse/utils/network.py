# ==============================================================================
# Network Utilities
# ==============================================================================
"""
Network utilities for resolving and classifying the host address.

Used by the network monitor (to detect address changes) and by the device
context (to report connectivity and network type).

Resolution policy:
1. A public IPv4 address found directly on an active interface
2. Optionally, the answer of an external "what is my IP" service
3. Any non-loopback, non-link-local IPv4 address
4. "" when nothing is available
"""

import ipaddress
import logging
import socket
from dataclasses import dataclass

import psutil
import requests

from adpulse.utils.retry import retry_lookup

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_TIMEOUT = 2.0  # seconds

# Interface name prefixes, checked in order
_NETWORK_TYPE_PREFIXES = [
    ("wifi", ("wlan", "wl", "wifi", "ap")),
    ("cellular", ("rmnet", "wwan", "ccmni", "pdp", "p2p")),
    ("vpn", ("tun", "tap", "wg", "ppp", "utun", "ipsec")),
    ("ethernet", ("eth", "en")),
]


@dataclass(frozen=True)
class InterfaceAddress:
    """An IPv4 address bound to an active, non-loopback interface."""

    interface: str
    address: str


def is_public_ip(ip: str) -> bool:
    """
    Check whether an address is publicly routable.

    Rejects private ranges (10.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16),
    loopback, link-local, unspecified, multicast and reserved addresses.

    Args:
        ip: Address string

    Returns:
        True for a valid public address, False otherwise
    """
    if not ip or not ip.strip():
        return False
    try:
        addr = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    return not (
        addr.is_private
        or addr.is_loopback
        or addr.is_link_local
        or addr.is_unspecified
        or addr.is_multicast
        or addr.is_reserved
    )


def classify_interface(name: str) -> str:
    """Map an interface name to a network type (wifi, cellular, vpn, ethernet)."""
    lowered = name.lower()
    for network_type, prefixes in _NETWORK_TYPE_PREFIXES:
        if lowered.startswith(prefixes):
            return network_type
    return "unknown"


def list_interface_addresses() -> list[InterfaceAddress]:
    """
    Enumerate IPv4 addresses on interfaces that are up and not loopback.

    Returns:
        Addresses in interface enumeration order; empty if enumeration fails
    """
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except Exception as e:
        logger.debug("Error enumerating network interfaces: %s", e)
        return []

    result = []
    for name, entries in addrs.items():
        stat = stats.get(name)
        if stat is None or not stat.isup:
            continue
        for entry in entries:
            if entry.family != socket.AF_INET or not entry.address:
                continue
            addr = ipaddress.ip_address(entry.address)
            if addr.is_loopback:
                continue
            result.append(InterfaceAddress(interface=name, address=entry.address))
    return result


def active_network_type(interfaces: list[InterfaceAddress] | None = None) -> str:
    """
    Network type of the first active interface.

    Returns:
        "disconnected" if no interface carries an address
    """
    if interfaces is None:
        interfaces = list_interface_addresses()
    if not interfaces:
        return "disconnected"
    return classify_interface(interfaces[0].interface)


@retry_lookup(logger)
def _fetch_ip_text(url: str, timeout: float) -> str:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text.strip()


def lookup_public_ip(services: list[str], timeout: float = DEFAULT_LOOKUP_TIMEOUT) -> str:
    """
    Ask external services for the caller's public address.

    Services are tried in order; the first public answer wins.

    Returns:
        Public address, or "" if no service answered with one
    """
    for service in services:
        try:
            ip = _fetch_ip_text(service, timeout)
        except requests.exceptions.RequestException as e:
            logger.debug("Failed to get IP from %s: %s", service, e)
            continue
        if is_public_ip(ip):
            return ip
    return ""


def resolve_address(
    interfaces: list[InterfaceAddress] | None = None,
    public_ip_services: list[str] | None = None,
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> str:
    """
    Resolve the address that best identifies this host on the network.

    Args:
        interfaces: Pre-enumerated interface addresses (enumerated if None)
        public_ip_services: External lookup services; None or empty skips
            the external lookup
        lookup_timeout: Timeout per lookup request in seconds

    Returns:
        The resolved address, or "" when disconnected
    """
    if interfaces is None:
        interfaces = list_interface_addresses()

    for entry in interfaces:
        if is_public_ip(entry.address):
            return entry.address

    if public_ip_services:
        public = lookup_public_ip(public_ip_services, lookup_timeout)
        if public:
            return public

    for entry in interfaces:
        if not ipaddress.ip_address(entry.address).is_link_local:
            return entry.address

    return ""
