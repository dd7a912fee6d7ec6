# SPDX-License-Identifier: MIT

import math
from typing import Union

from lessbyless.model.breakdown import BreakdownEntry, BreakdownMode
from lessbyless.time import (
    DAY_MS,
    HOUR_MS,
    MINUTE_MS,
    MONTH_MS,
    SECOND_MS,
    WEEK_MS,
    YEAR_MS,
)

# Month and year are fixed-length (30 and 365 days), matching the milestone table.
TIME_UNITS: list[tuple[str, int]] = [
    ("year", YEAR_MS),
    ("month", MONTH_MS),
    ("week", WEEK_MS),
    ("day", DAY_MS),
    ("hour", HOUR_MS),
    ("minute", MINUTE_MS),
    ("second", SECOND_MS),
]

LESS_THAN_A_SECOND = "Less than a second"


def pluralize(label: str, count: int) -> str:
    return label if count == 1 else f"{label}s"


def _zero_seconds() -> BreakdownEntry:
    return {"value": 0, "unit": pluralize("second", 0)}


def decompose(
    elapsed_ms: int,
    max_parts: int,
    mode: BreakdownMode = "trim",
) -> list[BreakdownEntry]:
    """
    Break a duration into (value, unit) parts, largest unit first.

    "trim" emits only units with a non-zero count and stops at max_parts.
    A duration under one second yields a single "0 seconds" part.

    "pad" always returns exactly max_parts parts, for layouts that need a
    fixed number of columns. It starts at the largest non-zero unit, keeps
    every following unit zero or not, and once seconds are used up fills
    the rest with "0 seconds" parts.
    """
    max_parts = max(1, max_parts)
    remainder = max(0, int(elapsed_ms))

    parts: list[BreakdownEntry] = []
    if remainder < SECOND_MS:
        parts.append(_zero_seconds())
    else:
        for label, unit_ms in TIME_UNITS:
            if len(parts) >= max_parts:
                break
            count = remainder // unit_ms
            if count > 0 or (mode == "pad" and parts):
                parts.append({"value": count, "unit": pluralize(label, count)})
                remainder -= count * unit_ms

    if mode == "pad":
        while len(parts) < max_parts:
            parts.append(_zero_seconds())
    return parts


def format_label(
    elapsed_ms: Union[int, float],
    parts: int = 2,
    mode: BreakdownMode = "trim",
) -> str:
    if not math.isfinite(elapsed_ms) or elapsed_ms <= 0:
        return LESS_THAN_A_SECOND

    return " ".join(
        f"{entry['value']} {entry['unit']}"
        for entry in decompose(int(elapsed_ms), parts, mode)
    )


def format_time_left(ms: int) -> str:
    """Compact countdown label such as "3h 20m" or "4d"."""
    if ms <= 0:
        return "now"
    if ms < HOUR_MS:
        return f"{math.ceil(ms / MINUTE_MS)}m"
    if ms < DAY_MS:
        hours = ms // HOUR_MS
        minutes = (ms % HOUR_MS) // MINUTE_MS
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if ms < MONTH_MS:
        days = ms // DAY_MS
        hours = (ms % DAY_MS) // HOUR_MS
        return f"{days}d {hours}h" if hours else f"{days}d"
    return f"{ms // DAY_MS}d"
