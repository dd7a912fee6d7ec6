# SPDX-License-Identifier: MIT

from typing import TypedDict


class Milestone(TypedDict):
    label: str
    duration_ms: int
