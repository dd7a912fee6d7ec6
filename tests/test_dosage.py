# SPDX-License-Identifier: MIT

import pendulum
import pytest

from conftest import make_dose_decrease
from lessbyless.service.dosage import (
    DoseLogValidationError,
    add_dose_log,
    clamp_week_index,
    convert_dose,
    daily_dose_totals,
    delete_dose_log,
    edit_dose_log,
    find_dose_log,
    last_dose_log,
    max_week_index,
    todays_dose_total,
    week_slice,
)
from lessbyless.time import datetime_to_iso_str


def test_convert_dose():
    assert convert_dose(500, "mg", "g") == 0.5
    assert convert_dose(0.5, "g", "mg") == 500
    assert convert_dose(42, "mg", "mg") == 42


def test_mixed_units_sum_in_display_unit(now):
    tracker = make_dose_decrease(now.subtract(days=10), unit="g")
    tracker = add_dose_log(tracker, 500, "mg", now.subtract(hours=2))
    tracker = add_dose_log(tracker, 0.5, "g", now.subtract(hours=1))

    assert todays_dose_total(tracker, now) == {"value": 1, "unit": "g"}


def test_empty_log_gives_zero_in_display_unit(now):
    tracker = make_dose_decrease(now, unit="mg")
    assert todays_dose_total(tracker, now) == {"value": 0, "unit": "mg"}


def test_todays_total_only_counts_the_local_day(now):
    tracker = make_dose_decrease(now.subtract(days=3))
    start_of_day = now.start_of("day")
    tracker = add_dose_log(tracker, 100, "mg", start_of_day)
    tracker = add_dose_log(tracker, 50, "mg", start_of_day.subtract(microseconds=1))
    tracker = add_dose_log(tracker, 25, "mg", start_of_day.add(days=1))

    assert todays_dose_total(tracker, now)["value"] == 100


def test_malformed_logs_are_skipped(now):
    tracker = make_dose_decrease(now.subtract(days=3))
    tracker = add_dose_log(tracker, 100, "mg", now)
    tracker["dose_logs"].append({"id": "x", "at": "sometime", "value": 5, "unit": "mg"})
    tracker["dose_logs"].append(
        {"id": "y", "at": datetime_to_iso_str(now), "value": float("nan"), "unit": "mg"}
    )
    tracker["dose_logs"].append(
        {"id": "z", "at": datetime_to_iso_str(now), "value": 5, "unit": "kg"}
    )

    assert todays_dose_total(tracker, now)["value"] == 100
    assert [day["value"] for day in daily_dose_totals(tracker, now)] == [100]


def test_daily_totals_fill_gaps(now):
    tracker = make_dose_decrease(now.subtract(days=4))
    tracker = add_dose_log(tracker, 200, "mg", now.subtract(days=4))
    tracker = add_dose_log(tracker, 150, "mg", now.subtract(hours=1))

    totals = daily_dose_totals(tracker, now)

    assert [day["value"] for day in totals] == [200, 0, 0, 0, 150]
    assert totals[0]["date"] == now.subtract(days=4).date()
    assert totals[-1]["date"] == now.date()


def test_daily_totals_run_through_today(now):
    tracker = make_dose_decrease(now.subtract(days=3))
    tracker = add_dose_log(tracker, 1, "g", now.subtract(days=2))

    totals = daily_dose_totals(tracker, now)

    assert [day["value"] for day in totals] == [1000, 0, 0]


def test_daily_totals_without_logs(now):
    assert daily_dose_totals(make_dose_decrease(now), now) == []


def _series(length, today):
    return [
        {"date": today.subtract(days=length - 1 - offset), "value": float(offset)}
        for offset in range(length)
    ]


def test_week_slice_pages_back_from_today(now):
    totals = _series(10, now.date())

    assert [day["value"] for day in week_slice(totals, 0)] == [3, 4, 5, 6, 7, 8, 9]
    assert [day["value"] for day in week_slice(totals, 1)] == [0, 1, 2]
    assert week_slice(totals, 2) == []
    assert max_week_index(totals) == 1


def test_week_index_is_clamped(now):
    totals = _series(14, now.date())

    assert max_week_index(totals) == 1
    assert clamp_week_index(totals, 5) == 1
    assert clamp_week_index(totals, -3) == 0
    assert max_week_index([]) == 0
    assert clamp_week_index([], 2) == 0


@pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf"), "10", None, True])
def test_invalid_amount_is_rejected(now, value):
    tracker = make_dose_decrease(now)

    with pytest.raises(DoseLogValidationError):
        add_dose_log(tracker, value, "mg", now)
    assert tracker["dose_logs"] == []


def test_invalid_unit_is_rejected(now):
    with pytest.raises(DoseLogValidationError):
        add_dose_log(make_dose_decrease(now), 10, "oz", now)


def test_add_does_not_mutate_the_input(now):
    tracker = make_dose_decrease(now)
    updated = add_dose_log(tracker, 10, "mg", now, note="after lunch")

    assert tracker["dose_logs"] == []
    assert len(updated["dose_logs"]) == 1
    assert updated["dose_logs"][0]["note"] == "after lunch"
    assert updated["dose_logs"][0]["id"]


def test_logs_in_the_same_instant_are_edited_independently(now):
    tracker = make_dose_decrease(now)
    tracker = add_dose_log(tracker, 10, "mg", now)
    tracker = add_dose_log(tracker, 20, "mg", now)
    first, second = tracker["dose_logs"]

    updated = edit_dose_log(tracker, second["id"], 25)

    assert updated is not None
    assert [log["value"] for log in updated["dose_logs"]] == [10, 25]
    assert find_dose_log(updated, first["id"])["value"] == 10


def test_edit_rejects_invalid_value(now):
    tracker = add_dose_log(make_dose_decrease(now), 10, "mg", now)
    log_id = tracker["dose_logs"][0]["id"]

    with pytest.raises(DoseLogValidationError):
        edit_dose_log(tracker, log_id, 0)
    assert tracker["dose_logs"][0]["value"] == 10


def test_edit_and_delete_of_missing_log(now):
    tracker = add_dose_log(make_dose_decrease(now), 10, "mg", now)

    assert edit_dose_log(tracker, "missing", 5) is None
    assert delete_dose_log(tracker, "missing") is None


def test_record_without_a_log_list_has_no_logs(now):
    tracker = make_dose_decrease(now)
    del tracker["dose_logs"]

    assert find_dose_log(tracker, "anything") is None
    assert last_dose_log(tracker) is None
    assert edit_dose_log(tracker, "anything", 5) is None
    assert delete_dose_log(tracker, "anything") is None
    assert todays_dose_total(tracker, now)["value"] == 0


def test_legacy_logs_match_by_timestamp(now):
    tracker = make_dose_decrease(now)
    at = datetime_to_iso_str(now)
    tracker["dose_logs"] = [{"at": at, "value": 10, "unit": "mg"}]

    edited = edit_dose_log(tracker, at, 15)
    deleted = delete_dose_log(tracker, at)

    assert edited["dose_logs"][0]["value"] == 15
    assert deleted["dose_logs"] == []


def test_delete_removes_only_the_matching_log(now):
    tracker = make_dose_decrease(now)
    tracker = add_dose_log(tracker, 10, "mg", now)
    tracker = add_dose_log(tracker, 20, "mg", now)

    updated = delete_dose_log(tracker, tracker["dose_logs"][0]["id"])

    assert [log["value"] for log in updated["dose_logs"]] == [20]
    assert len(tracker["dose_logs"]) == 2


def test_last_dose_log(now):
    tracker = make_dose_decrease(now)
    assert last_dose_log(tracker) is None

    tracker = add_dose_log(tracker, 30, "mg", now.subtract(hours=1))
    tracker = add_dose_log(tracker, 10, "mg", now.subtract(hours=5))

    assert last_dose_log(tracker)["value"] == 30


def test_timezone_of_log_does_not_change_its_local_day():
    now = pendulum.datetime(2026, 6, 15, 12, tz="local")
    tracker = make_dose_decrease(now)
    tracker = add_dose_log(tracker, 10, "mg", now.in_tz("UTC"))

    assert todays_dose_total(tracker, now)["value"] == 10
