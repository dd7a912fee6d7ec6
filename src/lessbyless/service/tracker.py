# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional, cast

import pendulum

from lessbyless.model.tracker import (
    ColdTurkeyTracker,
    DoseDecreaseTracker,
    ResetEntry,
    TrackerRecord,
)
from lessbyless.model.tracker_kind import VALID_KINDS, Kind, TrackerKind
from lessbyless.service.dosage import validate_dose_unit
from lessbyless.template.tracker import (
    get_cold_turkey_template,
    get_dose_decrease_template,
)
from lessbyless.time import datetime_to_iso_str


class TrackerValidationError(Exception):
    """Raised when a tracker cannot be created or edited as requested."""

    pass


def _validate_name(name: str) -> str:
    trimmed = name.strip()
    if not trimmed:
        raise TrackerValidationError("Tracker name must not be empty.")
    return trimmed


def create_cold_turkey(name: str, started_at: pendulum.DateTime) -> ColdTurkeyTracker:
    tracker = get_cold_turkey_template()
    tracker["name"] = _validate_name(name)
    tracker["started_at"] = datetime_to_iso_str(started_at)
    return tracker


def create_dose_decrease(
    name: str,
    started_at: pendulum.DateTime,
    current_usage_unit: str = "mg",
    current_usage_value: float = 0.0,
) -> DoseDecreaseTracker:
    tracker = get_dose_decrease_template()
    tracker["name"] = _validate_name(name)
    tracker["started_at"] = datetime_to_iso_str(started_at)
    tracker["current_usage_unit"] = validate_dose_unit(current_usage_unit)
    tracker["current_usage_value"] = float(current_usage_value)
    return tracker


def _convert_kind(tracker: TrackerRecord, kind: TrackerKind) -> TrackerRecord:
    """Switch a tracker's kind, keeping the common fields and resetting the rest."""
    converted: TrackerRecord
    if kind == Kind.COLD_TURKEY:
        converted = get_cold_turkey_template()
    else:
        converted = get_dose_decrease_template()
    converted["id"] = tracker["id"]
    converted["name"] = tracker["name"]
    converted["started_at"] = tracker["started_at"]
    return converted


def edit_tracker(
    tracker: TrackerRecord,
    name: Optional[str] = None,
    started_at: Optional[pendulum.DateTime] = None,
    kind: Optional[str] = None,
) -> TrackerRecord:
    if kind is not None and kind not in VALID_KINDS:
        raise TrackerValidationError(
            f"Invalid kind: {kind}. Valid options: {', '.join(VALID_KINDS)}"
        )

    updated: TrackerRecord = deepcopy(tracker)
    if kind is not None and kind != tracker["kind"]:
        updated = _convert_kind(updated, cast(TrackerKind, kind))
    if name is not None:
        updated["name"] = _validate_name(name)
    if started_at is not None:
        updated["started_at"] = datetime_to_iso_str(started_at)
    return updated


def reset_cold_turkey(
    tracker: ColdTurkeyTracker, now: pendulum.DateTime
) -> ColdTurkeyTracker:
    """
    End the running attempt and start a new one at now.

    The finished attempt is appended to reset_history so later streaks can be
    compared against it, and milestone notifications start over.
    """
    reset_at = datetime_to_iso_str(now)
    entry: ResetEntry = {"started_at": tracker["started_at"], "reset_at": reset_at}

    updated = deepcopy(tracker)
    updated["reset_history"] = list(updated.get("reset_history") or []) + [entry]
    updated["started_at"] = reset_at
    updated["notified_milestones"] = []
    return updated

