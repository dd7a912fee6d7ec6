# SPDX-License-Identifier: MIT

from typing import Literal

TrackerKind = Literal["cold_turkey", "dose_decrease"]
DosageUnit = Literal["mg", "g"]


class Kind:
    COLD_TURKEY = "cold_turkey"
    DOSE_DECREASE = "dose_decrease"


VALID_KINDS: list[str] = [Kind.COLD_TURKEY, Kind.DOSE_DECREASE]
VALID_UNITS: list[str] = ["mg", "g"]
