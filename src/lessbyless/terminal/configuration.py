# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from lessbyless import configuration
from lessbyless.repository.configuration import (
    CONFIGURATION_REPO,
    ConfigurationValidationError,
)
from lessbyless.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("tick_seconds", str(config["tick_seconds"]))
    table.add_row("milestone_scan_seconds", str(config["milestone_scan_seconds"]))
    table.add_row("breakdown_parts", str(config["breakdown_parts"]))
    table.add_row("breakdown_mode", config["breakdown_mode"])
    table.add_row(
        "notifications_enabled",
        "✓ Enabled" if config["notifications_enabled"] else "✗ Disabled",
    )
    table.add_row("widget_tracker_id", config["widget_tracker_id"] or "None")

    console.print(table)


@app.command("set, s")
def set_config(
    data_path: Annotated[
        Optional[str], typer.Option("--data-path", help="Directory for trackers.yaml")
    ] = None,
    remove_data_path: Annotated[
        bool, typer.Option("--remove-data-path", help="Use the default data directory")
    ] = False,
    tick_seconds: Annotated[
        Optional[float], typer.Option("--tick-seconds", help="Live refresh interval")
    ] = None,
    milestone_scan_seconds: Annotated[
        Optional[float],
        typer.Option("--milestone-scan-seconds", help="Milestone scan interval"),
    ] = None,
    breakdown_parts: Annotated[
        Optional[int],
        typer.Option("--breakdown-parts", help="Time units shown for elapsed time"),
    ] = None,
    breakdown_mode: Annotated[
        Optional[str], typer.Option("--breakdown-mode", help="trim, pad")
    ] = None,
    notifications_enabled: Annotated[
        Optional[bool],
        typer.Option("--notifications/--no-notifications"),
    ] = None,
) -> None:
    """Change configuration settings."""
    try:
        CONFIGURATION_REPO.update_config(
            data_path=data_path,
            remove_data_path=remove_data_path,
            tick_seconds=tick_seconds,
            milestone_scan_seconds=milestone_scan_seconds,
            breakdown_parts=breakdown_parts,
            breakdown_mode=breakdown_mode,
            notifications_enabled=notifications_enabled,
        )
    except ConfigurationValidationError as e:
        typer.echo(str(e))
        raise typer.Exit(1)

    view()
