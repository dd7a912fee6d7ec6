# SPDX-License-Identifier: MIT

from typing import cast

import pendulum
from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from lessbyless.model.breakdown import BreakdownMode
from lessbyless.model.tracker import (
    ColdTurkeyTracker,
    DoseDecreaseTracker,
    TrackerRecord,
)
from lessbyless.service.breakdown import decompose, format_label, format_time_left
from lessbyless.service.date_display import (
    calculate_days_tracked,
    format_date_for_display,
)
from lessbyless.service.dosage import todays_dose_total
from lessbyless.service.milestone import evaluate_cold_turkey_progress, get_elapsed_ms
from lessbyless.service.streak import compare_streak, select_streak_targets
from lessbyless.service.widget import format_dose_amount
from lessbyless.view.header import header

KIND_LABELS = {
    "cold_turkey": "Cold turkey",
    "dose_decrease": "Dose decrease",
}


def short_id(tracker: TrackerRecord) -> str:
    return tracker["id"][:8]


def _status_column(tracker: TrackerRecord, now: pendulum.DateTime) -> str:
    if tracker["kind"] == "cold_turkey":
        return format_label(get_elapsed_ms(tracker["started_at"], now))
    total = todays_dose_total(tracker, now)
    return f"today {format_dose_amount(total['value'])} {total['unit']}"


def trackers_view(trackers: list[TrackerRecord], now: pendulum.DateTime) -> None:
    header("trackers")

    trackers_table = Table(box=box.SIMPLE)
    for column in ["id", "name", "kind", "started", "status"]:
        trackers_table.add_column(column)

    for tracker in trackers:
        trackers_table.add_row(
            short_id(tracker),
            tracker["name"],
            KIND_LABELS.get(tracker["kind"], tracker["kind"]),
            format_date_for_display(tracker["started_at"]),
            _status_column(tracker, now),
        )

    console = Console()
    console.print(trackers_table)


def _streak_text(tracker: ColdTurkeyTracker, elapsed_ms: int) -> Text:
    targets = select_streak_targets(tracker.get("reset_history"))
    if not targets:
        return Text("")

    comparison = compare_streak(elapsed_ms, targets)
    time_left_ms = comparison["time_left_ms"]
    if comparison["active_target"] == "last" and time_left_ms is not None:
        return Text(
            f"{format_time_left(time_left_ms)} left to beat your last streak",
            style="sky_blue1",
        )
    if comparison["active_target"] == "record" and time_left_ms is not None:
        return Text(
            "Beat your last streak, now comparing against your record: "
            f"{format_time_left(time_left_ms)} to go",
            style="sky_blue1",
        )
    return Text("New record!", style="bold gold1")


def cold_turkey_panel(
    tracker: ColdTurkeyTracker,
    now: pendulum.DateTime,
    parts: int = 3,
    mode: BreakdownMode = "trim",
) -> RenderableType:
    progress = evaluate_cold_turkey_progress(tracker["started_at"], now)

    rows: list[RenderableType] = [
        Text("Cold turkey commitment", style="bold green"),
        Text(f"Since {format_date_for_display(tracker['started_at'])}", style="grey70"),
        Text(""),
    ]
    for entry in decompose(progress["elapsed_ms"], parts, mode):
        rows.append(Text(f"{entry['value']} {entry['unit']}", style="bold green"))

    rows.append(Text(""))
    rows.append(
        ProgressBar(total=1.0, completed=progress["progress_to_next"], width=40)
    )
    if progress["next"] is not None:
        rows.append(Text(f"Next milestone: {progress['next']['label']}"))
    else:
        rows.append(Text("All milestones achieved"))

    if progress["achieved"]:
        achieved = ", ".join(milestone["label"] for milestone in progress["achieved"])
        rows.append(Text(f"Milestones achieved: {achieved}", style="pale_green1"))

    streak = _streak_text(tracker, progress["elapsed_ms"])
    if streak.plain:
        rows.append(streak)

    return Panel(Group(*rows), title=tracker["name"], border_style="green")


def dose_decrease_panel(
    tracker: DoseDecreaseTracker, now: pendulum.DateTime
) -> RenderableType:
    total = todays_dose_total(tracker, now)
    days_tracked = calculate_days_tracked(tracker["started_at"], now)

    rows: list[RenderableType] = [
        Text("Steady dosage decrease", style="bold dark_orange"),
        Text(f"Started {format_date_for_display(tracker['started_at'])}", style="grey70"),
    ]
    if days_tracked is not None:
        day_word = "day" if days_tracked == 1 else "days"
        rows.append(
            Text(f"{days_tracked} {day_word} trimming dosage", style="dark_orange")
        )
    rows.append(
        Text(
            f"Baseline: {format_dose_amount(tracker['current_usage_value'])} "
            f"{tracker['current_usage_unit']}"
        )
    )
    rows.append(
        Text(
            f"Today's total: {format_dose_amount(total['value'])} {total['unit']}",
            style="bold",
        )
    )
    return Panel(Group(*rows), title=tracker["name"], border_style="dark_orange")


def tracker_panel(
    tracker: TrackerRecord,
    now: pendulum.DateTime,
    parts: int = 3,
    mode: BreakdownMode = "trim",
) -> RenderableType:
    if tracker["kind"] == "cold_turkey":
        return cold_turkey_panel(cast(ColdTurkeyTracker, tracker), now, parts, mode)
    return dose_decrease_panel(cast(DoseDecreaseTracker, tracker), now)


def single_tracker_view(
    tracker: TrackerRecord,
    now: pendulum.DateTime,
    parts: int = 3,
    mode: BreakdownMode = "trim",
) -> None:
    header("tracker")
    console = Console()
    console.print(tracker_panel(tracker, now, parts, mode))
