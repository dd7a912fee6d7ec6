# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from lessbyless.model.tracker_kind import DosageUnit


class DoseTotal(TypedDict):
    value: float
    unit: DosageUnit


class DailyDoseTotal(TypedDict):
    date: pendulum.Date
    value: float


class DosageWidgetSummary(TypedDict):
    name: str
    total_label: str  # e.g. "1.25 g"
    last_log_label: str
    days_label: Optional[str]
