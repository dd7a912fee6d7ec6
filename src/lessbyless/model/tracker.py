# SPDX-License-Identifier: MIT

from typing import Literal, NotRequired, Optional, TypedDict, Union

from lessbyless.model.entity_id import EntityId
from lessbyless.model.tracker_kind import DosageUnit

# Timestamps are stored as ISO-8601 strings, the same form they are persisted
# in, so a malformed value can be loaded and skipped instead of failing the load.


class ResetEntry(TypedDict):
    started_at: str
    reset_at: str


class DoseLogEntry(TypedDict):
    id: NotRequired[EntityId]  # missing on logs written before ids existed
    at: str  # when the dose was taken
    value: float
    unit: DosageUnit
    note: NotRequired[Optional[str]]


class ColdTurkeyTracker(TypedDict):
    id: EntityId
    name: str
    started_at: str
    kind: Literal["cold_turkey"]
    notified_milestones: list[int]  # duration thresholds in ms, used as a set
    reset_history: list[ResetEntry]


class DoseDecreaseTracker(TypedDict):
    id: EntityId
    name: str
    started_at: str
    kind: Literal["dose_decrease"]
    current_usage_unit: DosageUnit
    current_usage_value: float  # baseline, informational only
    dose_logs: list[DoseLogEntry]


TrackerRecord = Union[ColdTurkeyTracker, DoseDecreaseTracker]
