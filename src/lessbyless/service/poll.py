# SPDX-License-Identifier: MIT

import logging
import threading
from time import monotonic
from types import TracebackType
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Cadence:
    """
    Decides when a periodic job is due, against an injectable clock.

    The first call to due() is always True, after that once per interval.
    """

    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than 0")
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._next_due: Optional[float] = None

    def due(self) -> bool:
        now = self.clock()
        if self._next_due is not None and now < self._next_due:
            return False
        self._next_due = now + self.interval_seconds
        return True


class RepeatingTimer:
    """
    Calls callback every interval_seconds on a daemon thread until cancelled.

    Use as a context manager so the timer stops with the view that owns it.
    A callback that raises is logged and the timer keeps running.

    wait(seconds) blocks between ticks and returns True to stop the loop. It
    defaults to waiting on the timer's own stop event, which cancel() sets.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        name: str = "lessbyless-timer",
        wait: Optional[Callable[[float], bool]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than 0")
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self._stopped = threading.Event()
        self._wait = wait or self._stopped.wait
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("Timer %s callback failed", self.name)

    def __run(self) -> None:
        while not self._wait(self.interval_seconds):
            if self._stopped.is_set():
                return
            self.tick()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self.__run, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> "RepeatingTimer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.cancel()
