# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

BreakdownMode = Literal["trim", "pad"]


class BreakdownEntry(TypedDict):
    value: int
    unit: str  # pluralized label, e.g. "days"
