# SPDX-License-Identifier: MIT

from typing import TypedDict


class Notification(TypedDict):
    title: str
    body: str
