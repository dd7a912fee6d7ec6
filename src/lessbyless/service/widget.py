# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from lessbyless.model.dosage import DosageWidgetSummary
from lessbyless.model.entity_id import EntityId
from lessbyless.model.tracker import DoseDecreaseTracker, TrackerRecord
from lessbyless.service.breakdown import pluralize
from lessbyless.service.date_display import (
    calculate_days_tracked,
    format_relative_time,
)
from lessbyless.service.dosage import last_dose_log, todays_dose_total
from lessbyless.time import parse_timestamp_optional


def format_dose_amount(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.2f}"


def dosage_widget_summary(
    tracker: DoseDecreaseTracker, now: pendulum.DateTime
) -> DosageWidgetSummary:
    """Text shown on the home-screen dosage widget for one tracker."""
    total = todays_dose_total(tracker, now)

    last_log = last_dose_log(tracker)
    last_at = parse_timestamp_optional(last_log["at"]) if last_log else None
    if last_at is not None:
        last_log_label = f"Last logged {format_relative_time(last_at, now)}"
    else:
        last_log_label = "No entries logged today"

    days_tracked = calculate_days_tracked(tracker["started_at"], now)
    days_label = (
        None
        if days_tracked is None
        else f"{days_tracked} {pluralize('day', days_tracked)} of progress"
    )

    return {
        "name": tracker["name"],
        "total_label": f"{format_dose_amount(total['value'])} {total['unit']}",
        "last_log_label": last_log_label,
        "days_label": days_label,
    }


NO_WIDGET_TRACKER = "Choose a dosage tracker from LessByLess"
WIDGET_TRACKER_UNAVAILABLE = "The selected tracker is no longer available"


def find_widget_tracker(
    trackers: list[TrackerRecord], selected_id: Optional[EntityId]
) -> Optional[DoseDecreaseTracker]:
    if selected_id is None:
        return None
    for tracker in trackers:
        if tracker["id"] == selected_id and tracker["kind"] == "dose_decrease":
            return tracker
    return None


def resolve_widget_tracker(
    trackers: list[TrackerRecord], selected_id: Optional[EntityId]
) -> tuple[Optional[DoseDecreaseTracker], Optional[str]]:
    """
    Pick the tracker the widget should show.

    Returns the tracker, or None with the message the empty widget shows
    instead: nothing chosen yet, or the chosen tracker was deleted or is no
    longer a dose decrease tracker.
    """
    if selected_id is None:
        return None, NO_WIDGET_TRACKER
    tracker = find_widget_tracker(trackers, selected_id)
    if tracker is None:
        return None, WIDGET_TRACKER_UNAVAILABLE
    return tracker, None


def widget_selection_survives(
    tracker: TrackerRecord, selected_id: Optional[EntityId]
) -> bool:
    """False when a change to this tracker must clear the widget selection."""
    if selected_id is None or tracker["id"] != selected_id:
        return True
    return tracker["kind"] == "dose_decrease"
