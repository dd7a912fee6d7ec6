# SPDX-License-Identifier: MIT

import pytest

from lessbyless.service.breakdown import (
    TIME_UNITS,
    decompose,
    format_label,
    format_time_left,
)
from lessbyless.time import DAY_MS, HOUR_MS, MINUTE_MS, SECOND_MS

UNIT_MS = dict(TIME_UNITS)


def _singular(unit: str) -> str:
    return unit[:-1] if unit.endswith("s") else unit


@pytest.mark.parametrize("elapsed_ms", [0, 1, 999])
def test_sub_second_duration_yields_zero_seconds(elapsed_ms):
    assert decompose(elapsed_ms, 3) == [{"value": 0, "unit": "seconds"}]


def test_decompose_emits_largest_units_first():
    elapsed_ms = 5 * DAY_MS + 3 * HOUR_MS + 20 * MINUTE_MS
    assert decompose(elapsed_ms, 2) == [
        {"value": 5, "unit": "days"},
        {"value": 3, "unit": "hours"},
    ]


def test_decompose_uses_singular_label_for_one():
    assert decompose(DAY_MS + HOUR_MS, 3) == [
        {"value": 1, "unit": "day"},
        {"value": 1, "unit": "hour"},
    ]


def test_month_and_year_are_fixed_length():
    assert decompose(365 * DAY_MS, 3) == [{"value": 1, "unit": "year"}]
    assert decompose(400 * DAY_MS, 3) == [
        {"value": 1, "unit": "year"},
        {"value": 1, "unit": "month"},
        {"value": 5, "unit": "days"},
    ]
    assert decompose(30 * DAY_MS, 2) == [{"value": 1, "unit": "month"}]


def test_trim_mode_skips_empty_units():
    assert decompose(DAY_MS + 5 * MINUTE_MS, 3) == [
        {"value": 1, "unit": "day"},
        {"value": 5, "unit": "minutes"},
    ]


def test_pad_mode_keeps_following_units():
    assert decompose(DAY_MS + 5 * MINUTE_MS, 3, mode="pad") == [
        {"value": 1, "unit": "day"},
        {"value": 0, "unit": "hours"},
        {"value": 5, "unit": "minutes"},
    ]
    assert decompose(5 * MINUTE_MS, 3, mode="pad") == [
        {"value": 5, "unit": "minutes"},
        {"value": 0, "unit": "seconds"},
        {"value": 0, "unit": "seconds"},
    ]


@pytest.mark.parametrize("max_parts", [1, 2, 3, 5])
@pytest.mark.parametrize("elapsed_ms", [0, 500, 30 * SECOND_MS, 5 * MINUTE_MS, DAY_MS])
def test_pad_mode_always_fills_every_part(elapsed_ms, max_parts):
    parts = decompose(elapsed_ms, max_parts, mode="pad")

    assert len(parts) == max_parts


def test_pad_mode_under_a_second_is_all_zero_seconds():
    assert decompose(500, 3, mode="pad") == [{"value": 0, "unit": "seconds"}] * 3
    assert decompose(500, 3) == [{"value": 0, "unit": "seconds"}]


def test_max_parts_below_one_is_treated_as_one():
    assert decompose(2 * DAY_MS + HOUR_MS, 0) == [{"value": 2, "unit": "days"}]


@pytest.mark.parametrize("mode", ["trim", "pad"])
@pytest.mark.parametrize(
    "elapsed_ms",
    [
        SECOND_MS,
        61 * SECOND_MS + 500,
        3 * HOUR_MS + 17,
        9 * DAY_MS + 7 * HOUR_MS + 3 * MINUTE_MS + 4 * SECOND_MS,
        733 * DAY_MS + 12345,
    ],
)
def test_reconstructed_duration_is_within_smallest_unit(elapsed_ms, mode):
    parts = decompose(elapsed_ms, 2, mode)
    reconstructed = sum(
        part["value"] * UNIT_MS[_singular(part["unit"])] for part in parts
    )
    smallest = UNIT_MS[_singular(parts[-1]["unit"])]

    assert reconstructed <= elapsed_ms
    assert reconstructed > elapsed_ms - smallest


def test_format_label_joins_parts():
    assert format_label(5 * DAY_MS + 3 * HOUR_MS) == "5 days 3 hours"
    assert format_label(DAY_MS, parts=3) == "1 day"


@pytest.mark.parametrize("elapsed_ms", [0, -5, float("nan"), float("inf")])
def test_format_label_fallback(elapsed_ms):
    assert format_label(elapsed_ms) == "Less than a second"


@pytest.mark.parametrize(
    "ms, expected",
    [
        (0, "now"),
        (-1, "now"),
        (90 * SECOND_MS, "2m"),
        (2 * HOUR_MS, "2h"),
        (2 * HOUR_MS + 5 * MINUTE_MS, "2h 5m"),
        (3 * DAY_MS, "3d"),
        (3 * DAY_MS + 4 * HOUR_MS, "3d 4h"),
        (45 * DAY_MS + 4 * HOUR_MS, "45d"),
    ],
)
def test_format_time_left(ms, expected):
    assert format_time_left(ms) == expected
