# SPDX-License-Identifier: MIT

import pendulum
import pytest

from lessbyless.model.tracker import ColdTurkeyTracker, DoseDecreaseTracker
from lessbyless.time import datetime_to_iso_str


@pytest.fixture
def now() -> pendulum.DateTime:
    # Midday, away from DST switches, so local-day bucketing is stable
    return pendulum.datetime(2026, 6, 15, 12, 0, 0, tz="local")


def make_cold_turkey(
    started_at: pendulum.DateTime, name: str = "Smoking"
) -> ColdTurkeyTracker:
    return {
        "id": "11111111-1111-1111-1111-111111111111",
        "name": name,
        "started_at": datetime_to_iso_str(started_at),
        "kind": "cold_turkey",
        "notified_milestones": [],
        "reset_history": [],
    }


def make_dose_decrease(
    started_at: pendulum.DateTime, unit: str = "mg"
) -> DoseDecreaseTracker:
    return {
        "id": "22222222-2222-2222-2222-222222222222",
        "name": "Caffeine",
        "started_at": datetime_to_iso_str(started_at),
        "kind": "dose_decrease",
        "current_usage_unit": unit,  # type: ignore[typeddict-item]
        "current_usage_value": 400.0,
        "dose_logs": [],
    }
