# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from lessbyless.model.tracker import TrackerRecord
from lessbyless.time import datetime_from_str_utc


def parse_datetime(datetime_param: Optional[str | int]) -> Optional[pendulum.DateTime]:
    if datetime_param is None:
        return None

    datetime = str(datetime_param)

    # Match YYYY-MM-DD format (with optional time component)
    if re.match(r"\d{4}-\d{2}-\d{2}", datetime):
        try:
            return datetime_from_str_utc(datetime)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {e}")

    # Match (H)H:mm format (time only, use today's date)
    time_match = re.match(r"^(\d{1,2}):(\d{2})$", datetime)
    if time_match:
        hour = int(time_match.group(1))
        minute = int(time_match.group(2))

        if hour < 0 or hour > 23:
            raise typer.BadParameter(f"Hour must be between 0 and 23, got {hour}")
        if minute < 0 or minute > 59:
            raise typer.BadParameter(f"Minute must be between 0 and 59, got {minute}")

        pendulum_date_time = pendulum.today("local").set(
            hour=hour, minute=minute, second=0, microsecond=0
        )
        return pendulum_date_time.in_tz("UTC")

    # Match numeric input for relative days (e.g., "1", "-1", "365")
    if re.match(r"^-?\d+$", datetime):
        days_offset = int(datetime)
        pendulum_date_time = pendulum.today("local").add(days=days_offset)
        return pendulum_date_time.in_tz("UTC")

    if datetime == "now" or datetime == "n":
        return pendulum.now("UTC")
    if datetime == "today" or datetime == "t":
        return pendulum.today("local").in_tz("UTC")
    if datetime == "yesterday" or datetime == "y":
        return pendulum.yesterday("local").in_tz("UTC")
    raise typer.BadParameter("Incorrect datetime format")


def resolve_tracker(
    trackers: list[TrackerRecord], id_param: str
) -> Optional[TrackerRecord]:
    """Find a tracker by full id or by a unique id prefix."""
    matches = [tracker for tracker in trackers if tracker["id"].startswith(id_param)]
    for tracker in matches:
        if tracker["id"] == id_param:
            return tracker
    if len(matches) > 1:
        raise typer.BadParameter(f"Ambiguous tracker id: '{id_param}'")
    return matches[0] if matches else None
