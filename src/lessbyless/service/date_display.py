# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from lessbyless.time import (
    DAY_MS,
    HOUR_MS,
    MINUTE_MS,
    datetime_to_display_local_date_str,
    milliseconds_between,
    parse_timestamp_optional,
)
from lessbyless.service.breakdown import pluralize

UNKNOWN_DATE = "Unknown date"


def format_date_for_display(value: Optional[str]) -> str:
    parsed = parse_timestamp_optional(value)
    if parsed is None:
        return UNKNOWN_DATE
    return datetime_to_display_local_date_str(parsed)


def calculate_days_tracked(
    started_at: Optional[str], now: pendulum.DateTime
) -> Optional[int]:
    """Whole days since started_at, 0 for a future start, None if unparseable."""
    parsed = parse_timestamp_optional(started_at)
    if parsed is None:
        return None

    diff = milliseconds_between(parsed, now)
    if diff < 0:
        return 0
    return diff // DAY_MS


def format_relative_time(at: pendulum.DateTime, now: pendulum.DateTime) -> str:
    diff = milliseconds_between(at, now)

    if diff <= 0:
        return "just now"
    if diff < MINUTE_MS:
        return "moments ago"
    if diff < HOUR_MS:
        minutes = diff // MINUTE_MS
        return f"{minutes} {pluralize('minute', minutes)} ago"
    if diff < DAY_MS:
        hours = diff // HOUR_MS
        return f"{hours} {pluralize('hour', hours)} ago"

    days = diff // DAY_MS
    return f"{days} {pluralize('day', days)} ago"
