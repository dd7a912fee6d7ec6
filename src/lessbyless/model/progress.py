# SPDX-License-Identifier: MIT

from typing import Literal, NotRequired, Optional, TypedDict

from lessbyless.model.milestone import Milestone
from lessbyless.model.tracker import ResetEntry


class ColdTurkeyProgress(TypedDict):
    achieved: list[Milestone]
    elapsed_ms: int
    next: Optional[Milestone]
    progress_to_next: float  # 0..1
    previous_duration_ms: int


class StreakTarget(ResetEntry):
    duration_ms: int


class StreakTargets(TypedDict):
    last: NotRequired[StreakTarget]
    record: NotRequired[StreakTarget]


class StreakComparison(TypedDict):
    has_gone_longer: bool
    has_hit_record: bool
    active_target: Optional[Literal["last", "record"]]
    time_left_ms: Optional[int]
