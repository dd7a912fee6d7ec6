# SPDX-License-Identifier: MIT

from typing import Optional, Union

import pendulum

from lessbyless.model.milestone import Milestone
from lessbyless.model.progress import ColdTurkeyProgress
from lessbyless.time import (
    DAY_MS,
    HOUR_MS,
    milliseconds_between,
    parse_timestamp_optional,
)

COLD_TURKEY_MILESTONES: tuple[Milestone, ...] = (
    {"label": "12 hours", "duration_ms": 12 * HOUR_MS},
    {"label": "1 day", "duration_ms": 1 * DAY_MS},
    {"label": "2 days", "duration_ms": 2 * DAY_MS},
    {"label": "3 days", "duration_ms": 3 * DAY_MS},
    {"label": "5 days", "duration_ms": 5 * DAY_MS},
    {"label": "1 week", "duration_ms": 7 * DAY_MS},
    {"label": "2 weeks", "duration_ms": 14 * DAY_MS},
    {"label": "1 month", "duration_ms": 30 * DAY_MS},
    {"label": "2 months", "duration_ms": 60 * DAY_MS},
    {"label": "3 months", "duration_ms": 90 * DAY_MS},
    {"label": "1 year", "duration_ms": 365 * DAY_MS},
)


def _copy_milestone(milestone: Milestone) -> Milestone:
    return {"label": milestone["label"], "duration_ms": milestone["duration_ms"]}


def get_milestone_by_duration(duration_ms: int) -> Optional[Milestone]:
    for milestone in COLD_TURKEY_MILESTONES:
        if milestone["duration_ms"] == duration_ms:
            return _copy_milestone(milestone)
    return None


def get_elapsed_ms(
    started_at: Union[str, pendulum.DateTime, None], now: pendulum.DateTime
) -> int:
    """Milliseconds since started_at, clamped at 0. Unparseable starts count as 0."""
    if isinstance(started_at, pendulum.DateTime):
        started = started_at
    else:
        parsed = parse_timestamp_optional(started_at)
        if parsed is None:
            return 0
        started = parsed
    return max(0, milliseconds_between(started, now))


def evaluate_cold_turkey_progress(
    started_at: Union[str, pendulum.DateTime, None],
    now: pendulum.DateTime,
) -> ColdTurkeyProgress:
    elapsed_ms = get_elapsed_ms(started_at, now)

    achieved = [
        _copy_milestone(milestone)
        for milestone in COLD_TURKEY_MILESTONES
        if milestone["duration_ms"] <= elapsed_ms
    ]
    next_milestone: Optional[Milestone] = next(
        (
            _copy_milestone(milestone)
            for milestone in COLD_TURKEY_MILESTONES
            if milestone["duration_ms"] > elapsed_ms
        ),
        None,
    )
    previous_duration_ms = achieved[-1]["duration_ms"] if achieved else 0

    if next_milestone is None:
        progress_to_next = 1.0
    else:
        progress_to_next = min(
            1.0, max(0.0, elapsed_ms / next_milestone["duration_ms"])
        )

    return {
        "achieved": achieved,
        "elapsed_ms": elapsed_ms,
        "next": next_milestone,
        "progress_to_next": progress_to_next,
        "previous_duration_ms": previous_duration_ms,
    }
