# ==============================================================================
# Event Commands
# ==============================================================================
"""
Commands that produce analytics events: send one event to the collector, or
simulate a whole session through an in-process pipeline.
"""

import json
from typing import Annotated, Optional

import typer
from rich.console import Console

from adpulse.base.ad_unit import AdListener, AdUnit
from adpulse.cli.shared import C, I, parse_metadata, print_events
from adpulse.core.builder import AnalyticsEventBuilder
from adpulse.core.models import EventType
from adpulse.core.session_manager import AnalyticsManager
from adpulse.infrastructure.ad_view import AdView
from adpulse.infrastructure.device_info import HostDeviceContext
from adpulse.infrastructure.factory import create_api_client
from adpulse.infrastructure.lifecycle import ActivityLifecycleRegistry
from adpulse.utils.config import get_settings

SIMULATED_AD_UNIT_ID = "simulated-unit"


class SimulatedAdUnit(AdUnit):
    """Ad unit that answers every load immediately and can fake user actions."""

    def __init__(self):
        self._listener: AdListener | None = None

    def set_listener(self, listener: AdListener | None) -> None:
        self._listener = listener

    def load(self, ad_unit_id: str, width: int, height: int) -> None:
        if self._listener is not None:
            self._listener.on_ad_loaded()

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def destroy(self) -> None:
        self._listener = None

    def show(self) -> None:
        if self._listener is not None:
            self._listener.on_ad_impression()

    def click(self) -> None:
        if self._listener is not None:
            self._listener.on_ad_clicked()
            self._listener.on_ad_opened()
            self._listener.on_ad_closed()


# ==============================================================================
# Commands
# ==============================================================================


def send_event(
    event_type: Annotated[EventType, typer.Argument(help="Event type to send")],
    ad_unit_id: Annotated[
        str, typer.Option("--ad-unit-id", "-u", help="Ad unit or subject id")
    ] = "cli",
    meta: Annotated[
        Optional[list[str]],
        typer.Option("--meta", "-m", help="Metadata entry as key=value (repeatable)"),
    ] = None,
) -> None:
    """Build one event and deliver it to the collector synchronously.

    Examples:
        adpulse send AD_CLICKED --ad-unit-id unit1 --meta x=1
    """
    settings = get_settings()
    metadata = parse_metadata(meta)

    event = (
        AnalyticsEventBuilder(HostDeviceContext())
        .set_event_type(event_type)
        .set_ad_unit_id(ad_unit_id)
        .add_all_metadata(metadata)
        .build()
    )

    client = create_api_client(settings.collector)
    try:
        response = client.deliver(event)
    finally:
        client.shutdown()

    if response is None:
        print(f"  {C.BRIGHT_RED}{I.CROSS} Delivery to {settings.collector.url} failed{C.RESET}")
        raise typer.Exit(code=1)

    print(f"  {C.BRIGHT_GREEN}{I.CHECK} {event_type.value} delivered{C.RESET}")
    print(f"  {C.DIM}{json.dumps(response.model_dump())}{C.RESET}")


def simulate_session(
    impressions: Annotated[
        int, typer.Option("--impressions", "-i", min=0, help="Ad impressions to simulate")
    ] = 3,
    clicks: Annotated[int, typer.Option("--clicks", "-c", min=0, help="Ad clicks to simulate")] = 1,
    send: Annotated[
        bool, typer.Option("--send/--no-send", help="Deliver events to the collector")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Simulate one foreground session with ad traffic and show the recorded events.

    Examples:
        adpulse simulate
        adpulse simulate --impressions 5 --clicks 2 --send
    """
    settings = get_settings()
    registry = ActivityLifecycleRegistry()
    manager = AnalyticsManager(
        HostDeviceContext(),
        client_factory=(lambda: create_api_client(settings.collector)) if send else None,
        max_events=settings.session.max_events_in_memory,
        session_timeout_seconds=settings.session.timeout_seconds,
    )

    with manager:
        manager.initialize(registry)
        registry.enter_foreground("main")

        ad_unit = SimulatedAdUnit()
        view = AdView(manager, ad_unit, ad_unit_id=SIMULATED_AD_UNIT_ID)
        for _ in range(impressions):
            view.load_ad()
            ad_unit.show()
        for _ in range(clicks):
            ad_unit.click()
        view.destroy()

        registry.enter_background("main")
        events = manager.get_events()

    if json_output:
        print(json.dumps([event.to_dict() for event in events], indent=2))
        return

    console = Console()
    print()
    print_events(console, events, title="Simulated Session")
    print(f"  {C.BOLD}Events:{C.RESET}   {len(events)}")
    delivery = "sent to " + settings.collector.url if send else "not sent"
    print(f"  {C.BOLD}Delivery:{C.RESET} {delivery}")
    print()
