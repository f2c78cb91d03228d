# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration management commands for the adpulse CLI.
"""

import json
from typing import Annotated

import typer

from adpulse.cli.shared import C
from adpulse.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration."""
    settings = get_settings()

    # JSON output mode
    if json_output:
        config = {
            "collector": {
                "enabled": settings.collector.enabled,
                "url": settings.collector.url,
                "connect_timeout_seconds": settings.collector.connect_timeout_seconds,
                "read_timeout_seconds": settings.collector.read_timeout_seconds,
                "max_workers": settings.collector.max_workers,
            },
            "session": {
                "timeout_minutes": settings.session.timeout_minutes,
                "max_events_in_memory": settings.session.max_events_in_memory,
            },
            "network": {
                "check_interval_seconds": settings.network.check_interval_seconds,
                "public_ip_lookup": settings.network.public_ip_lookup,
                "public_ip_services": settings.network.public_ip_services,
                "lookup_timeout_seconds": settings.network.lookup_timeout_seconds,
            },
            "debug": settings.debug,
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}Collector{C.RESET}")
    enabled = "enabled" if settings.collector.enabled else "disabled"
    print(f"  Delivery:   {C.WHITE}{enabled}{C.RESET}")
    print(f"  URL:        {C.WHITE}{settings.collector.url}{C.RESET}")
    print(
        f"  Timeouts:   {C.WHITE}{settings.collector.connect_timeout_seconds:g}s connect, "
        f"{settings.collector.read_timeout_seconds:g}s read{C.RESET}"
    )
    print(f"  Workers:    {C.WHITE}{settings.collector.max_workers}{C.RESET}")
    print()

    print(f"{C.CYAN}Session{C.RESET}")
    print(f"  Timeout:    {C.WHITE}{settings.session.timeout_minutes:g} minutes{C.RESET}")
    print(f"  Max events: {C.WHITE}{settings.session.max_events_in_memory:,}{C.RESET}")
    print()

    print(f"{C.CYAN}Network{C.RESET}")
    print(f"  Interval:   {C.WHITE}{settings.network.check_interval_seconds:g}s{C.RESET}")
    lookup = "enabled" if settings.network.public_ip_lookup else "disabled"
    print(f"  IP lookup:  {C.WHITE}{lookup}{C.RESET}")
    print()
