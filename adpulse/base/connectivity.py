# ==============================================================================
# Connectivity Source Abstract Base Classes
# ==============================================================================
"""
Abstract interface for connectivity notifications.

Hosts that can observe connectivity changes (network available, lost, or
link properties changed) push them into a listener. The network monitor is
such a listener; it also polls on its own, so a source is optional.
"""

from abc import ABC, abstractmethod


class ConnectivityListener(ABC):
    """Receiver of connectivity notifications."""

    @abstractmethod
    def on_available(self) -> None:
        """A network became available."""
        ...

    @abstractmethod
    def on_lost(self) -> None:
        """The network was lost."""
        ...

    @abstractmethod
    def on_link_properties_changed(self) -> None:
        """Addresses or routes of the current network changed."""
        ...


class ConnectivitySource(ABC):
    """Something connectivity listeners can subscribe to."""

    @abstractmethod
    def register_listener(self, listener: ConnectivityListener) -> None:
        """
        Start delivering notifications to the listener.

        May raise if the platform refuses the registration.
        """
        ...

    @abstractmethod
    def unregister_listener(self, listener: ConnectivityListener) -> None:
        """Stop delivering notifications to the listener."""
        ...
