# SPDX-License-Identifier: MIT

import atexit

from lessbyless.repository.configuration import CONFIGURATION_REPO
from lessbyless.repository.tracker import TRACKER_REPO


def flush() -> None:
    CONFIGURATION_REPO.flush()
    TRACKER_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
