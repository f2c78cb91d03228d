# ==============================================================================
# Device Command
# ==============================================================================
"""
Shows the device, network and locale snapshots attached to every event.
"""

import json
from typing import Annotated

import typer
from rich.console import Console

from adpulse.cli.shared import C, print_snapshot
from adpulse.infrastructure.device_info import HostDeviceContext
from adpulse.utils.config import get_settings
from adpulse.utils.network import resolve_address


def show_device(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the device, network and locale snapshots for this host.

    Examples:
        adpulse device
        adpulse device --json
    """
    settings = get_settings()
    context = HostDeviceContext()

    services = settings.network.public_ip_services if settings.network.public_ip_lookup else None
    address = resolve_address(
        public_ip_services=services, lookup_timeout=settings.network.lookup_timeout_seconds
    )
    if address:
        context.set_address(address, rotate_session=False)

    snapshot = {
        "session_id": context.get_session_id(),
        "device_info": context.get_device_info(),
        "network_info": context.get_network_info(),
        "locale_info": context.get_locale_info(),
    }

    if json_output:
        print(json.dumps(snapshot, indent=2))
        return

    console = Console()
    print()
    print(f"  {C.BOLD}Session:{C.RESET}  {snapshot['session_id']}")
    print()
    print_snapshot(console, "Device", snapshot["device_info"])
    print_snapshot(console, "Network", snapshot["network_info"])
    print_snapshot(console, "Locale", snapshot["locale_info"])
    print()
