# ==============================================================================
# Device Context Provider Abstract Base Class
# ==============================================================================
"""
Abstract interface for the environment facts attached to every event.

Implementations are pure data sources: they return key-value snapshots and
own the current session identifier, which rotates when the host address
changes.
"""

from abc import ABC, abstractmethod
from typing import Any


class DeviceContextProvider(ABC):
    """Source of session id and device/network/locale snapshots."""

    @abstractmethod
    def get_session_id(self) -> str:
        """Return the session identifier currently in effect."""
        ...

    @abstractmethod
    def generate_new_session_id(self) -> str:
        """
        Replace the session identifier with a fresh one.

        Returns:
            The new session identifier
        """
        ...

    @abstractmethod
    def get_device_info(self) -> dict[str, Any]:
        """Return a snapshot of device identity, OS variant and hardware facts."""
        ...

    @abstractmethod
    def get_network_info(self) -> dict[str, Any]:
        """Return a snapshot of connectivity, network type and address."""
        ...

    @abstractmethod
    def get_locale_info(self) -> dict[str, str]:
        """Return a snapshot of the host locale."""
        ...

    @abstractmethod
    def set_address(self, address: str, rotate_session: bool = True) -> None:
        """
        Record the current host address.

        Args:
            address: New address
            rotate_session: Generate a new session id if the address changed
        """
        ...
