# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- A deterministic in-memory DeviceContextProvider
- A recording EventSender standing in for the HTTP delivery client
- A manual clock and timer factory for driving session timeouts
- A ready-to-use AnalyticsManager wired to all of the above
"""

import itertools
from concurrent.futures import Future

import pytest

from adpulse.base.delivery import EventSender
from adpulse.base.device_context import DeviceContextProvider
from adpulse.core.session_manager import AnalyticsManager
from adpulse.infrastructure.lifecycle import ActivityLifecycleRegistry


class FakeDeviceContext(DeviceContextProvider):
    """Device context with fixed snapshots and sequential session ids."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.session_id = f"session-{next(self._ids)}"
        self.address = ""

    def get_session_id(self) -> str:
        return self.session_id

    def generate_new_session_id(self) -> str:
        self.session_id = f"session-{next(self._ids)}"
        return self.session_id

    def get_device_info(self) -> dict:
        return {"manufacturer": "Acme", "model": "T-1000"}

    def get_network_info(self) -> dict:
        return {"is_connected": True, "network_type": "wifi", "ip_address": self.address}

    def get_locale_info(self) -> dict:
        return {"language": "en", "country": "US"}

    def set_address(self, address: str, rotate_session: bool = True) -> None:
        if address == self.address:
            return
        self.address = address
        if rotate_session:
            self.generate_new_session_id()


class RecordingSender(EventSender):
    """EventSender that keeps every event it is handed."""

    def __init__(self):
        self.sent = []
        self.shutdown_calls = []

    def send_event(self, event):
        self.sent.append(event)
        future = Future()
        future.set_result(None)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self.shutdown_calls.append(wait)


class ManualClock:
    """Epoch-millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class ManualTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class ManualTimerFactory:
    """Creates ManualTimers and remembers them."""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


@pytest.fixture()
def device_context():
    return FakeDeviceContext()


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def timers():
    return ManualTimerFactory()


@pytest.fixture()
def lifecycle():
    return ActivityLifecycleRegistry()


@pytest.fixture()
def manager(device_context, sender, clock, timers):
    """An uninitialized manager that delivers into a RecordingSender."""
    mgr = AnalyticsManager(
        device_context,
        client_factory=lambda: sender,
        session_timeout_seconds=60,
        clock=clock,
        timer_factory=timers,
    )
    yield mgr
    mgr.cleanup()
