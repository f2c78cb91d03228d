# ==============================================================================
# AdPulse Analytics CLI
# ==============================================================================
"""
Command-line interface for the adpulse ad analytics pipeline.

Usage:
    adpulse --help
    adpulse config show
    adpulse device --json
    adpulse send AD_CLICKED --ad-unit-id unit1 --meta x=1
    adpulse simulate --impressions 5 --clicks 2
"""

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
import os
from typing import Annotated

import typer

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="adpulse",
    help="Ad analytics pipeline CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

from adpulse.cli.shared import configure_logging
from adpulse.utils.config import get_settings


@app.callback()
def main_callback(
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
) -> None:
    """Ad analytics pipeline CLI"""
    settings = get_settings()
    configure_logging(settings.log_level, debug=debug or settings.debug)


config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from adpulse.cli.config import config_show

config_app.command("show")(config_show)

# Device command is imported from adpulse.cli.device
from adpulse.cli.device import show_device

app.command("device")(show_device)

# Event commands are imported from adpulse.cli.events
from adpulse.cli.events import send_event, simulate_session

app.command("send")(send_event)
app.command("simulate")(simulate_session)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
