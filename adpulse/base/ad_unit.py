# ==============================================================================
# Ad Unit Abstract Base Class
# ==============================================================================
"""
Abstract interface over the third-party ads library.

The ad view only needs to load, pause, resume and destroy an ad unit, and to
receive its listener callbacks. Rendering is the library's business.
"""

from abc import ABC, abstractmethod
from typing import Protocol


class AdListener(Protocol):
    """Callbacks an ad unit reports through."""

    def on_ad_loaded(self) -> None: ...

    def on_ad_failed_to_load(self, code: int, domain: str, message: str | None) -> None: ...

    def on_ad_opened(self) -> None: ...

    def on_ad_clicked(self) -> None: ...

    def on_ad_impression(self) -> None: ...

    def on_ad_closed(self) -> None: ...


class AdUnit(ABC):
    """A single ad slot provided by the ads library."""

    @abstractmethod
    def set_listener(self, listener: AdListener | None) -> None:
        """Attach the receiver for ad lifecycle callbacks."""
        ...

    @abstractmethod
    def load(self, ad_unit_id: str, width: int, height: int) -> None:
        """
        Request an ad for the given unit and size.

        Results arrive asynchronously through the listener.
        """
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def resume(self) -> None:
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Release the ad unit; it must not be used afterwards."""
        ...
