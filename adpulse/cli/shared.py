# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Helpers shared by the adpulse command modules:
- ANSI color codes and status icons
- Logging setup for CLI runs
- Parsing of key=value metadata options
- Rich table rendering of key-value snapshots and event lists
"""

import json
import logging

import typer
from rich.console import Console
from rich.table import Table

from adpulse.core.models import AnalyticsEvent

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Delivery outcome
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"


# Short aliases
C = Colors
I = Icons  # noqa: E741


# ==============================================================================
# Logging
# ==============================================================================


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure root logging for a CLI run."""
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


# ==============================================================================
# Option Parsing
# ==============================================================================


def _coerce_value(raw: str):
    """Interpret a metadata value as JSON when possible, else keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_metadata(pairs: list[str] | None) -> dict:
    """Parse repeated ``key=value`` options into a metadata dict.

    Raises:
        typer.BadParameter: If an entry has no '=' or an empty key
    """
    metadata = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Invalid metadata entry: '{pair}'. Use key=value")
        metadata[key.strip()] = _coerce_value(value)
    return metadata


# ==============================================================================
# Rich Output
# ==============================================================================


def print_snapshot(console: Console, title: str, snapshot: dict) -> None:
    """Render a key-value snapshot as a two-column table."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Key", justify="left")
    table.add_column("Value", justify="left")
    for key in sorted(snapshot):
        table.add_row(key, str(snapshot[key]))
    console.print(table)


def print_events(console: Console, events: list[AnalyticsEvent], title: str = "Events") -> None:
    """Render recorded events, one row each."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Time", justify="left")
    table.add_column("Type", justify="left")
    table.add_column("Subject", justify="left")
    table.add_column("Metadata", justify="left")
    for index, event in enumerate(events, start=1):
        table.add_row(
            str(index),
            event.event_time.strftime("%H:%M:%S.%f")[:-3],
            event.event_type.value,
            event.ad_unit_id,
            json.dumps(event.metadata) if event.metadata else "-",
        )
    console.print(table)
