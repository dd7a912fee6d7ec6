# SPDX-License-Identifier: MIT

from lessbyless.model.entity_id import generate_entity_id
from lessbyless.model.tracker import ColdTurkeyTracker, DoseDecreaseTracker
from lessbyless.time import datetime_to_iso_str, now_utc


def get_cold_turkey_template() -> ColdTurkeyTracker:
    return {
        "id": generate_entity_id(),
        "name": "",
        "started_at": datetime_to_iso_str(now_utc()),
        "kind": "cold_turkey",
        "notified_milestones": [],
        "reset_history": [],
    }


def get_dose_decrease_template() -> DoseDecreaseTracker:
    return {
        "id": generate_entity_id(),
        "name": "",
        "started_at": datetime_to_iso_str(now_utc()),
        "kind": "dose_decrease",
        "current_usage_unit": "mg",
        "current_usage_value": 0.0,
        "dose_logs": [],
    }
