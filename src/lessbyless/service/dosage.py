# SPDX-License-Identifier: MIT

import logging
import math
from copy import deepcopy
from typing import Any, Optional

import pendulum

from lessbyless.model.dosage import DailyDoseTotal, DoseTotal
from lessbyless.model.entity_id import generate_entity_id
from lessbyless.model.tracker import DoseDecreaseTracker, DoseLogEntry
from lessbyless.model.tracker_kind import VALID_UNITS, DosageUnit
from lessbyless.time import datetime_to_iso_str, parse_timestamp_optional

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


class DoseLogValidationError(Exception):
    """Raised when a dose log amount or unit is rejected."""

    pass


def convert_dose(value: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return value
    if from_unit == "mg" and to_unit == "g":
        return value / 1000
    if from_unit == "g" and to_unit == "mg":
        return value * 1000
    return value


def _is_valid_amount(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _log_milligrams(log: Any) -> Optional[tuple[pendulum.DateTime, float]]:
    """(timestamp, amount in mg) for a usable log, None for anything malformed."""
    if not isinstance(log, dict):
        return None
    at = parse_timestamp_optional(log.get("at"))
    value = log.get("value")
    unit = log.get("unit")
    if at is None or not _is_valid_amount(value) or unit not in VALID_UNITS:
        return None
    return at, convert_dose(float(value), unit, "mg")


def _usable_logs(tracker: DoseDecreaseTracker) -> list[tuple[pendulum.DateTime, float]]:
    usable = []
    for log in tracker.get("dose_logs") or []:
        converted = _log_milligrams(log)
        if converted is None:
            logger.debug("Skipping malformed dose log on tracker %s", tracker["id"])
            continue
        usable.append(converted)
    return usable


def todays_dose_total(
    tracker: DoseDecreaseTracker, now: pendulum.DateTime
) -> DoseTotal:
    """Sum of today's logs (local calendar day) in the tracker's display unit."""
    unit = tracker["current_usage_unit"]
    start = now.in_tz("local").start_of("day")
    end = start.add(days=1)

    total_mg = sum(
        milligrams for at, milligrams in _usable_logs(tracker) if start <= at < end
    )
    return {"value": convert_dose(total_mg, "mg", unit), "unit": unit}


def daily_dose_totals(
    tracker: DoseDecreaseTracker, now: pendulum.DateTime
) -> list[DailyDoseTotal]:
    """
    One entry per local calendar day from the earliest logged day through today.

    Days without logs are present with a value of 0.
    """
    unit = tracker["current_usage_unit"]
    totals_mg: dict[pendulum.Date, float] = {}
    for at, milligrams in _usable_logs(tracker):
        day = at.in_tz("local").date()
        totals_mg[day] = totals_mg.get(day, 0.0) + milligrams

    if not totals_mg:
        return []

    today = now.in_tz("local").date()
    current_date = min(totals_mg)
    daily_totals: list[DailyDoseTotal] = []
    while current_date <= today:
        daily_totals.append(
            {
                "date": current_date,
                "value": convert_dose(totals_mg.get(current_date, 0.0), "mg", unit),
            }
        )
        current_date = current_date.add(days=1)

    return daily_totals


def max_week_index(daily_totals: list[DailyDoseTotal]) -> int:
    if not daily_totals:
        return 0
    return (len(daily_totals) - 1) // DAYS_PER_WEEK


def clamp_week_index(daily_totals: list[DailyDoseTotal], week_index: int) -> int:
    return min(max(0, week_index), max_week_index(daily_totals))


def week_slice(
    daily_totals: list[DailyDoseTotal], week_index: int
) -> list[DailyDoseTotal]:
    """
    Up to seven consecutive days, week 0 being the seven days ending today.

    Callers clamp week_index with clamp_week_index; an index past the end
    yields an empty list.
    """
    if week_index < 0:
        return []
    end = len(daily_totals) - week_index * DAYS_PER_WEEK
    if end <= 0:
        return []
    start = max(0, end - DAYS_PER_WEEK)
    return daily_totals[start:end]


def validate_dose_value(value: Any) -> float:
    if not _is_valid_amount(value):
        raise DoseLogValidationError(
            f"Dose amount must be a finite number greater than 0. Got: {value}"
        )
    return float(value)


def validate_dose_unit(unit: Any) -> DosageUnit:
    if unit not in VALID_UNITS:
        raise DoseLogValidationError(
            f"Invalid unit: {unit}. Valid options: {', '.join(VALID_UNITS)}"
        )
    return unit  # type: ignore[no-any-return]


def _matches(log: DoseLogEntry, log_key: str) -> bool:
    # Logs written before ids were assigned are matched by their timestamp
    if "id" in log:
        return log["id"] == log_key
    return log.get("at") == log_key


def find_dose_log(
    tracker: DoseDecreaseTracker, log_key: str
) -> Optional[DoseLogEntry]:
    for log in tracker.get("dose_logs") or []:
        if _matches(log, log_key):
            return deepcopy(log)
    return None


def last_dose_log(tracker: DoseDecreaseTracker) -> Optional[DoseLogEntry]:
    latest: Optional[tuple[pendulum.DateTime, DoseLogEntry]] = None
    for log in tracker.get("dose_logs") or []:
        at = parse_timestamp_optional(log.get("at"))
        if at is None:
            continue
        if latest is None or at > latest[0]:
            latest = (at, log)
    return deepcopy(latest[1]) if latest is not None else None


def add_dose_log(
    tracker: DoseDecreaseTracker,
    value: Any,
    unit: Any,
    at: pendulum.DateTime,
    note: Optional[str] = None,
) -> DoseDecreaseTracker:
    """Return a copy of tracker with a new log appended; raises DoseLogValidationError."""
    log: DoseLogEntry = {
        "id": generate_entity_id(),
        "at": datetime_to_iso_str(at),
        "value": validate_dose_value(value),
        "unit": validate_dose_unit(unit),
    }
    if note:
        log["note"] = note

    updated = deepcopy(tracker)
    updated["dose_logs"] = list(updated.get("dose_logs") or []) + [log]
    return updated


def edit_dose_log(
    tracker: DoseDecreaseTracker, log_key: str, value: Any
) -> Optional[DoseDecreaseTracker]:
    """Return a copy with the matching log's value replaced, None if no log matches."""
    new_value = validate_dose_value(value)

    updated = deepcopy(tracker)
    for log in updated.get("dose_logs") or []:
        if _matches(log, log_key):
            log["value"] = new_value
            return updated
    return None


def delete_dose_log(
    tracker: DoseDecreaseTracker, log_key: str
) -> Optional[DoseDecreaseTracker]:
    """Return a copy without the matching log, None if no log matches."""
    logs = tracker.get("dose_logs") or []
    remaining = [log for log in logs if not _matches(log, log_key)]
    if len(remaining) == len(logs):
        return None

    updated = deepcopy(tracker)
    updated["dose_logs"] = deepcopy(remaining)
    return updated
