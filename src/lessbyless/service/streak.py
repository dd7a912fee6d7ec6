# SPDX-License-Identifier: MIT

import logging
from typing import Any, Iterable, Optional

import pendulum

from lessbyless.model.progress import StreakComparison, StreakTarget, StreakTargets
from lessbyless.time import milliseconds_between, parse_timestamp_optional

logger = logging.getLogger(__name__)


def _to_streak_target(entry: Any) -> Optional[tuple[pendulum.DateTime, StreakTarget]]:
    if not isinstance(entry, dict):
        return None

    started_at = parse_timestamp_optional(entry.get("started_at"))
    reset_at = parse_timestamp_optional(entry.get("reset_at"))
    if started_at is None or reset_at is None or reset_at < started_at:
        return None

    target: StreakTarget = {
        "started_at": entry["started_at"],
        "reset_at": entry["reset_at"],
        "duration_ms": milliseconds_between(started_at, reset_at),
    }
    return reset_at, target


def select_streak_targets(reset_history: Optional[Iterable[Any]]) -> StreakTargets:
    """
    Pick the comparison targets for a cold turkey tracker's previous attempts.

    "last" is the attempt with the latest reset, "record" the longest one. On a
    tie for longest the earliest reset wins. Entries with an unparseable
    timestamp or a reset before their start are ignored.
    """
    valid: list[tuple[pendulum.DateTime, StreakTarget]] = []
    dropped = 0
    for entry in reset_history or []:
        converted = _to_streak_target(entry)
        if converted is None:
            dropped += 1
            continue
        valid.append(converted)

    if dropped:
        logger.debug("Ignored %d malformed reset history entries", dropped)

    if not valid:
        return {}

    # sorted() is stable, so equal reset times keep their history order
    ordered = [target for _, target in sorted(valid, key=lambda pair: pair[0])]

    record = ordered[0]
    for target in ordered[1:]:
        if target["duration_ms"] > record["duration_ms"]:
            record = target

    return {"last": ordered[-1], "record": record}


def compare_streak(elapsed_ms: int, targets: StreakTargets) -> StreakComparison:
    """
    Compare the running streak against the previous attempts.

    The last streak is beaten once elapsed reaches its duration, after which the
    record becomes the target; reaching the record clears the target.
    """
    last = targets.get("last")
    record = targets.get("record")

    has_gone_longer = last is not None and elapsed_ms >= last["duration_ms"]
    has_hit_record = record is not None and elapsed_ms >= record["duration_ms"]

    if last is not None and not has_gone_longer:
        return {
            "has_gone_longer": False,
            "has_hit_record": has_hit_record,
            "active_target": "last",
            "time_left_ms": last["duration_ms"] - elapsed_ms,
        }
    if record is not None and not has_hit_record:
        return {
            "has_gone_longer": has_gone_longer,
            "has_hit_record": False,
            "active_target": "record",
            "time_left_ms": record["duration_ms"] - elapsed_ms,
        }
    return {
        "has_gone_longer": has_gone_longer,
        "has_hit_record": has_hit_record,
        "active_target": None,
        "time_left_ms": None,
    }
