# ==============================================================================
# Host Device Context
# ==============================================================================
"""
DeviceContextProvider implementation backed by the running host.

Collects device identity and OS variant (platform, psutil), network state
(psutil interfaces) and locale (locale, time). Also owns the session id,
which rotates whenever the recorded host address changes.
"""

import locale
import logging
import os
import platform
import threading
import time
import uuid
from pathlib import Path
from typing import Any

import psutil

from adpulse.base.device_context import DeviceContextProvider
from adpulse.utils.network import active_network_type, list_interface_addresses

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = "unknown"

# OS variant detection
OS_VARIANT_UNKNOWN = "unknown"
OS_VARIANT_MACOS = "macos"
OS_VARIANT_WINDOWS = "windows"

_VIRTUAL_MARKERS = ("/.dockerenv", "/run/.containerenv")


def detect_os_variant() -> tuple[str, str]:
    """
    Detect the OS distribution or edition.

    Returns:
        Tuple of (variant_name, variant_version); ("unknown", "") when the
        host does not expose one
    """
    system = platform.system()
    try:
        if system == "Linux":
            release = platform.freedesktop_os_release()
            return release.get("ID", OS_VARIANT_UNKNOWN), release.get("VERSION_ID", "")
        if system == "Darwin":
            version = platform.mac_ver()[0]
            return OS_VARIANT_MACOS, version
        if system == "Windows":
            return platform.win32_edition() or OS_VARIANT_WINDOWS, platform.version()
    except OSError:
        pass
    return OS_VARIANT_UNKNOWN, ""


def is_virtual_host() -> bool:
    """Best guess whether we run inside a container or under a hypervisor."""
    if any(Path(marker).exists() for marker in _VIRTUAL_MARKERS):
        return True
    try:
        cpuinfo = Path("/proc/cpuinfo").read_text(errors="ignore")
    except OSError:
        return False
    return " hypervisor" in cpuinfo


class HostDeviceContext(DeviceContextProvider):
    """
    Device context for the current host.

    Static device facts are collected once and cached; network facts are
    collected on every call.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._session_id = str(uuid.uuid4())
        self._ip_address = UNKNOWN_ADDRESS
        self._device_info: dict[str, Any] | None = None

    # ------------------------------------------------------------------
    # Session id / address
    # ------------------------------------------------------------------

    def get_session_id(self) -> str:
        with self._lock:
            return self._session_id

    def generate_new_session_id(self) -> str:
        with self._lock:
            self._session_id = str(uuid.uuid4())
            return self._session_id

    def set_address(self, address: str, rotate_session: bool = True) -> None:
        with self._lock:
            if address == self._ip_address:
                return
            self._ip_address = address
            if rotate_session:
                self._session_id = str(uuid.uuid4())
                logger.debug("Address changed to %s, session id rotated", address)

    def get_ip_address(self) -> str:
        with self._lock:
            return self._ip_address

    def clear_cache(self) -> None:
        """Forget the recorded address and cached device facts."""
        with self._lock:
            self._ip_address = UNKNOWN_ADDRESS
            self._device_info = None

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def get_device_info(self) -> dict[str, Any]:
        with self._lock:
            if self._device_info is None:
                self._device_info = self._collect_device_info()
            return dict(self._device_info)

    def _collect_device_info(self) -> dict[str, Any]:
        uname = platform.uname()
        variant, variant_version = detect_os_variant()
        try:
            memory_total_mb = psutil.virtual_memory().total // (1024 * 1024)
        except Exception:
            memory_total_mb = 0

        return {
            # Basic device info
            "manufacturer": platform.system(),
            "model": uname.machine,
            "hostname": uname.node,
            "architecture": platform.machine(),
            "is_virtual": is_virtual_host(),
            # OS info
            "os_name": uname.system,
            "os_version": uname.version,
            "os_release": uname.release,
            "os_variant": variant,
            "os_variant_version": variant_version,
            "is_custom_os": variant != OS_VARIANT_UNKNOWN,
            "python_version": platform.python_version(),
            # Hardware
            "cpu_count": psutil.cpu_count(logical=True) or os.cpu_count() or 0,
            "memory_total_mb": memory_total_mb,
        }

    def get_network_info(self) -> dict[str, Any]:
        interfaces = list_interface_addresses()
        return {
            "is_connected": bool(interfaces),
            "network_type": active_network_type(interfaces),
            "ip_address": self.get_ip_address(),
        }

    def get_locale_info(self) -> dict[str, str]:
        language_code, encoding = locale.getlocale()
        tag = language_code or "C"
        base, _, variant = tag.partition("@")
        language, _, country = base.partition("_")
        return {
            "language": language,
            "country": country,
            "display_name": tag,
            "encoding": encoding or "",
            "variant": variant,
            "timezone": time.strftime("%Z"),
        }
