# SPDX-License-Identifier: MIT

import calendar
from typing import Optional, cast

import pendulum

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS
MONTH_MS = 30 * DAY_MS
YEAR_MS = 365 * DAY_MS


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("UTC").isoformat()


def datetime_from_str_utc(datetime: str) -> pendulum.DateTime:
    pendulum_date_time = cast(pendulum.DateTime, pendulum.parse(datetime))
    pendulum_date_time = pendulum_date_time.set(tz="local")
    pendulum_date_time = pendulum_date_time.in_tz("UTC")
    return pendulum_date_time


def parse_timestamp_optional(value: Optional[str]) -> Optional[pendulum.DateTime]:
    """
    Parse a persisted ISO-8601 timestamp.

    Returns None for a missing or unparseable value so callers can skip the
    record instead of failing.
    """
    if not isinstance(value, str) or value == "":
        return None
    try:
        parsed = pendulum.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if not isinstance(parsed, pendulum.DateTime):
        return None
    return parsed


def epoch_milliseconds(datetime: pendulum.DateTime) -> int:
    utc = datetime.in_tz("UTC")
    return calendar.timegm(utc.utctimetuple()) * SECOND_MS + utc.microsecond // 1000


def milliseconds_between(start: pendulum.DateTime, end: pendulum.DateTime) -> int:
    return epoch_milliseconds(end) - epoch_milliseconds(start)


def datetime_to_display_local_date_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM D, YYYY")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd HH:mm")
