# SPDX-License-Identifier: MIT

import pendulum
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lessbyless.model.dosage import DailyDoseTotal, DosageWidgetSummary, DoseTotal
from lessbyless.model.tracker import DoseDecreaseTracker
from lessbyless.service.date_display import UNKNOWN_DATE
from lessbyless.service.widget import format_dose_amount
from lessbyless.time import (
    datetime_to_display_local_datetime_str,
    parse_timestamp_optional,
)
from lessbyless.view.header import header

BAR_WIDTH = 30


def dose_logs_view(tracker: DoseDecreaseTracker) -> None:
    header(f"dose logs: {tracker['name']}")

    logs_table = Table(box=box.SIMPLE)
    for column in ["id", "at", "amount", "note"]:
        logs_table.add_column(column)

    logs = tracker.get("dose_logs") or []
    for log in sorted(logs, key=lambda log: log.get("at", "")):
        at = parse_timestamp_optional(log.get("at"))
        logs_table.add_row(
            log.get("id", log["at"])[:8],
            datetime_to_display_local_datetime_str(at) if at else UNKNOWN_DATE,
            f"{format_dose_amount(log['value'])} {log['unit']}",
            log.get("note") or "",
        )

    console = Console()
    console.print(logs_table)


def todays_total_view(tracker: DoseDecreaseTracker, total: DoseTotal) -> None:
    header("today")
    console = Console()
    console.print(
        f"[bold]{tracker['name']}[/bold] today's total: "
        f"[dark_orange]{format_dose_amount(total['value'])} {total['unit']}[/dark_orange]"
    )


def week_chart_view(
    tracker: DoseDecreaseTracker,
    week: list[DailyDoseTotal],
    week_index: int,
    max_week_index: int,
) -> None:
    header(f"week {week_index + 1} of {max_week_index + 1}: {tracker['name']}")

    console = Console()
    if not week:
        console.print("No doses logged yet")
        return

    unit = tracker["current_usage_unit"]
    peak = max(day["value"] for day in week)

    chart_table = Table(box=box.SIMPLE)
    chart_table.add_column("day")
    chart_table.add_column("total", justify="right")
    chart_table.add_column("")

    for day in week:
        date: pendulum.Date = day["date"]
        bar_length = int(round(BAR_WIDTH * day["value"] / peak)) if peak > 0 else 0
        chart_table.add_row(
            date.format("ddd MMM D"),
            f"{format_dose_amount(day['value'])} {unit}",
            Text("█" * bar_length, style="dark_orange"),
        )

    console.print(chart_table)


def widget_view(summary: DosageWidgetSummary) -> None:
    rows = [
        Text("Dosage focus", style="medium_purple1"),
        Text(summary["name"], style="bold"),
        Text("Today's total", style="grey70"),
        Text(summary["total_label"], style="bold dark_orange"),
        Text(summary["last_log_label"]),
    ]
    if summary["days_label"] is not None:
        rows.append(Text(summary["days_label"], style="grey62"))

    console = Console()
    console.print(Panel(Text("\n").join(rows), width=40))


def empty_widget_view(message: str) -> None:
    rows = [
        Text("Dosage focus", style="medium_purple1"),
        Text(message, style="grey70"),
    ]

    console = Console()
    console.print(Panel(Text("\n").join(rows), width=48))
