# SPDX-License-Identifier: MIT

from typing import Annotated, Optional, cast

import typer

from lessbyless.model.tracker import DoseDecreaseTracker, DoseLogEntry, TrackerRecord
from lessbyless.repository.configuration import CONFIGURATION_REPO
from lessbyless.repository.tracker import TRACKER_REPO
from lessbyless.service.dosage import (
    DoseLogValidationError,
    add_dose_log,
    clamp_week_index,
    daily_dose_totals,
    delete_dose_log,
    edit_dose_log,
    max_week_index,
    todays_dose_total,
    week_slice,
)
from lessbyless.service.widget import (
    NO_WIDGET_TRACKER,
    dosage_widget_summary,
    resolve_widget_tracker,
)
from lessbyless.terminal.custom_typer import AliasedTyperGroup
from lessbyless.terminal.parse import parse_datetime, resolve_tracker
from lessbyless.time import now_utc
from lessbyless.view import dosage as dosage_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def get_dose_tracker_or_exit(id: str) -> DoseDecreaseTracker:
    tracker = resolve_tracker(TRACKER_REPO.get_all_trackers(), id)
    if tracker is None:
        typer.echo(f"Tracker not found: {id}")
        raise typer.Exit(1)
    if tracker["kind"] != "dose_decrease":
        typer.echo(f"Tracker '{tracker['name']}' is not a dose decrease tracker.")
        raise typer.Exit(1)
    return tracker


def resolve_log_key(tracker: DoseDecreaseTracker, log_param: str) -> str:
    """Map a full or prefixed log id (or a legacy timestamp) to the log's key."""
    matches: list[DoseLogEntry] = []
    for log in tracker.get("dose_logs") or []:
        key = log.get("id", log["at"])
        if key == log_param:
            return key
        if key.startswith(log_param):
            matches.append(log)
    if len(matches) > 1:
        raise typer.BadParameter(f"Ambiguous log id: '{log_param}'")
    if not matches:
        typer.echo(f"Log not found: {log_param}")
        raise typer.Exit(1)
    return matches[0].get("id", matches[0]["at"])


@app.command("add, a", no_args_is_help=True)
def add(
    tracker_id: str,
    value: float,
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="mg, g (default: the tracker's unit)"),
    ] = None,
    at: Annotated[
        Optional[str],
        typer.Option("--at", help="When the dose was taken (default now)"),
    ] = None,
    note: Annotated[Optional[str], typer.Option("--note", "-n")] = None,
) -> None:
    """Log one dose."""
    tracker = get_dose_tracker_or_exit(tracker_id)
    taken_at = parse_datetime(at) or now_utc()
    log_unit = unit or tracker["current_usage_unit"]

    try:
        stored = TRACKER_REPO.update_tracker(
            tracker["id"],
            lambda current: add_dose_log(
                cast(DoseDecreaseTracker, current), value, log_unit, taken_at, note
            ),
        )
    except DoseLogValidationError as e:
        typer.echo(f"Log not recorded: {e}")
        raise typer.Exit(1)

    if stored is None:
        typer.echo(f"Tracker not found: {tracker_id}")
        raise typer.Exit(1)

    updated = cast(DoseDecreaseTracker, stored)
    dosage_report.todays_total_view(updated, todays_dose_total(updated, now_utc()))


@app.command("modify, m", no_args_is_help=True)
def modify(tracker_id: str, log_id: str, value: float) -> None:
    """Change the amount of a logged dose."""
    tracker = get_dose_tracker_or_exit(tracker_id)
    log_key = resolve_log_key(tracker, log_id)
    missing: list[str] = []

    def apply(current: TrackerRecord) -> TrackerRecord:
        updated = edit_dose_log(cast(DoseDecreaseTracker, current), log_key, value)
        if updated is None:
            missing.append(log_key)
            return current
        return updated

    try:
        stored = TRACKER_REPO.update_tracker(tracker["id"], apply)
    except DoseLogValidationError as e:
        typer.echo(f"Log not updated: {e}")
        raise typer.Exit(1)
    if stored is None or missing:
        typer.echo(f"Log not found: {log_id}")
        raise typer.Exit(1)

    dosage_report.dose_logs_view(cast(DoseDecreaseTracker, stored))


@app.command("delete, del", no_args_is_help=True)
def delete(tracker_id: str, log_id: str) -> None:
    """Remove a logged dose."""
    tracker = get_dose_tracker_or_exit(tracker_id)
    log_key = resolve_log_key(tracker, log_id)
    missing: list[str] = []

    def apply(current: TrackerRecord) -> TrackerRecord:
        updated = delete_dose_log(cast(DoseDecreaseTracker, current), log_key)
        if updated is None:
            missing.append(log_key)
            return current
        return updated

    stored = TRACKER_REPO.update_tracker(tracker["id"], apply)
    if stored is None or missing:
        typer.echo(f"Log not found: {log_id}")
        raise typer.Exit(1)

    dosage_report.dose_logs_view(cast(DoseDecreaseTracker, stored))


@app.command("list, ls", no_args_is_help=True)
def list_logs(tracker_id: str) -> None:
    """List a tracker's dose logs."""
    dosage_report.dose_logs_view(get_dose_tracker_or_exit(tracker_id))


@app.command("today, t", no_args_is_help=True)
def today(tracker_id: str) -> None:
    """Show today's total."""
    tracker = get_dose_tracker_or_exit(tracker_id)
    dosage_report.todays_total_view(tracker, todays_dose_total(tracker, now_utc()))


@app.command("chart, ch", no_args_is_help=True)
def chart(
    tracker_id: str,
    week: Annotated[
        int,
        typer.Option("--week", "-w", help="0 is the week ending today, 1 the one before"),
    ] = 0,
) -> None:
    """Chart daily totals one week at a time."""
    tracker = get_dose_tracker_or_exit(tracker_id)
    daily_totals = daily_dose_totals(tracker, now_utc())
    week_index = clamp_week_index(daily_totals, week)

    dosage_report.week_chart_view(
        tracker,
        week_slice(daily_totals, week_index),
        week_index,
        max_week_index(daily_totals),
    )


@app.command("widget, wg")
def widget(
    tracker_id: Annotated[Optional[str], typer.Argument()] = None,
    select: Annotated[
        bool,
        typer.Option("--select", help="Make this tracker the widget's tracker"),
    ] = False,
    clear: Annotated[
        bool, typer.Option("--clear", help="Forget the widget's tracker")
    ] = False,
) -> None:
    """Show the dosage widget for the chosen tracker, or for TRACKER_ID."""
    if clear:
        CONFIGURATION_REPO.update_config(clear_widget_tracker=True)
        typer.echo("Widget tracker cleared")
        return

    if tracker_id is not None:
        tracker = get_dose_tracker_or_exit(tracker_id)
        if select:
            CONFIGURATION_REPO.update_config(widget_tracker_id=tracker["id"])
        dosage_report.widget_view(dosage_widget_summary(tracker, now_utc()))
        return

    if select:
        raise typer.BadParameter("--select needs a tracker id")

    selected_id = CONFIGURATION_REPO.get_config()["widget_tracker_id"]
    selected, message = resolve_widget_tracker(
        TRACKER_REPO.get_all_trackers(), selected_id
    )
    if selected is None:
        if selected_id is not None:
            CONFIGURATION_REPO.update_config(clear_widget_tracker=True)
        dosage_report.empty_widget_view(message or NO_WIDGET_TRACKER)
        return
    dosage_report.widget_view(dosage_widget_summary(selected, now_utc()))
