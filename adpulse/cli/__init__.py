# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the adpulse analytics pipeline.

Commands are organized into separate modules for maintainability:
- shared.py: Common utilities, constants, and helpers
- config.py: Configuration display
- device.py: Device/network/locale snapshots
- events.py: Sending and simulating events
"""

from adpulse.cli.shared import (
    LOG_FORMAT,
    C,
    Colors,
    I,
    Icons,
    configure_logging,
    parse_metadata,
    print_events,
    print_snapshot,
)

__all__ = [
    "LOG_FORMAT",
    "C",
    "Colors",
    "I",
    "Icons",
    "configure_logging",
    "parse_metadata",
    "print_events",
    "print_snapshot",
]
