# SPDX-License-Identifier: MIT

from typing import Annotated, Optional, cast

import typer

from lessbyless.model.tracker import ColdTurkeyTracker, TrackerRecord
from lessbyless.model.tracker_kind import VALID_KINDS, Kind
from lessbyless.repository.configuration import CONFIGURATION_REPO
from lessbyless.repository.tracker import TRACKER_REPO
from lessbyless.service.dosage import DoseLogValidationError
from lessbyless.service.tracker import (
    TrackerValidationError,
    create_cold_turkey,
    create_dose_decrease,
    edit_tracker,
    reset_cold_turkey,
)
from lessbyless.service.widget import widget_selection_survives
from lessbyless.terminal.custom_typer import AliasedTyperGroup
from lessbyless.terminal.parse import parse_datetime, resolve_tracker
from lessbyless.time import now_utc
from lessbyless.view import tracker as tracker_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def get_tracker_or_exit(id: str) -> TrackerRecord:
    tracker = resolve_tracker(TRACKER_REPO.get_all_trackers(), id)
    if tracker is None:
        typer.echo(f"Tracker not found: {id}")
        raise typer.Exit(1)
    return tracker


def show_tracker(tracker: TrackerRecord) -> None:
    config = CONFIGURATION_REPO.get_config()
    tracker_report.single_tracker_view(
        tracker,
        now_utc(),
        parts=config["breakdown_parts"],
        mode=config["breakdown_mode"],
    )


@app.command("add, a", no_args_is_help=True)
def add(
    name: str,
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="cold_turkey, dose_decrease"),
    ] = Kind.COLD_TURKEY,
    started: Annotated[
        Optional[str],
        typer.Option("--started", "-s", help="When the attempt started (default now)"),
    ] = None,
    unit: Annotated[
        str,
        typer.Option("--unit", "-u", help="Display unit for dose trackers: mg, g"),
    ] = "mg",
    usage: Annotated[
        float,
        typer.Option("--usage", help="Current daily usage for dose trackers"),
    ] = 0.0,
) -> None:
    """Create a new tracker."""
    if kind not in VALID_KINDS:
        typer.echo(f"Invalid kind: {kind}. Valid options: {', '.join(VALID_KINDS)}")
        raise typer.Exit(1)

    started_at = parse_datetime(started) or now_utc()

    tracker: TrackerRecord
    try:
        if kind == Kind.COLD_TURKEY:
            tracker = create_cold_turkey(name, started_at)
        else:
            tracker = create_dose_decrease(name, started_at, unit, usage)
    except (TrackerValidationError, DoseLogValidationError) as e:
        typer.echo(str(e))
        raise typer.Exit(1)

    TRACKER_REPO.save_new_tracker(tracker)
    show_tracker(tracker)


@app.command("list, ls")
def list_trackers() -> None:
    """List all trackers."""
    tracker_report.trackers_view(TRACKER_REPO.get_all_trackers(), now_utc())


@app.command("show, sh", no_args_is_help=True)
def show(id: str) -> None:
    """Show one tracker's progress."""
    show_tracker(get_tracker_or_exit(id))


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: str,
    name: Annotated[Optional[str], typer.Option("--name", "-n")] = None,
    started: Annotated[Optional[str], typer.Option("--started", "-s")] = None,
    kind: Annotated[
        Optional[str],
        typer.Option("--kind", "-k", help="cold_turkey, dose_decrease"),
    ] = None,
) -> None:
    """Rename a tracker, move its start date or change its kind."""
    tracker = get_tracker_or_exit(id)
    started_at = parse_datetime(started)

    try:
        stored = TRACKER_REPO.update_tracker(
            tracker["id"],
            lambda current: edit_tracker(
                current, name=name, started_at=started_at, kind=kind
            ),
        )
    except TrackerValidationError as e:
        typer.echo(str(e))
        raise typer.Exit(1)
    if stored is None:
        typer.echo(f"Tracker not found: {id}")
        raise typer.Exit(1)

    if not widget_selection_survives(
        stored, CONFIGURATION_REPO.get_config()["widget_tracker_id"]
    ):
        CONFIGURATION_REPO.update_config(clear_widget_tracker=True)
    show_tracker(stored)


@app.command("reset, r", no_args_is_help=True)
def reset(id: str) -> None:
    """Restart a cold turkey tracker from now, keeping the attempt in its history."""
    tracker = get_tracker_or_exit(id)
    if tracker["kind"] != "cold_turkey":
        typer.echo("Only cold turkey trackers can be reset.")
        raise typer.Exit(1)

    now = now_utc()
    updated = TRACKER_REPO.update_tracker(
        tracker["id"],
        lambda current: reset_cold_turkey(cast(ColdTurkeyTracker, current), now),
    )
    if updated is None:
        typer.echo(f"Tracker not found: {id}")
        raise typer.Exit(1)
    show_tracker(updated)


@app.command("delete, del", no_args_is_help=True)
def delete(
    id: str,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a tracker."""
    tracker = get_tracker_or_exit(id)
    if not yes:
        typer.confirm(f"Delete tracker '{tracker['name']}'?", abort=True)

    TRACKER_REPO.delete_tracker(tracker["id"])
    if CONFIGURATION_REPO.get_config()["widget_tracker_id"] == tracker["id"]:
        CONFIGURATION_REPO.update_config(clear_widget_tracker=True)
    typer.echo(f"Deleted tracker: {tracker['name']}")
