from __future__ import annotations

import time
from threading import Lock
from typing import Callable

from ..core.ports.rate_limiter_port import RateLimiterPort


class SimpleRateLimiter(RateLimiterPort):
    """Space requests at least ``1 / requests_per_second`` apart.

    Shared by the worker threads that fetch both finding halves, so the
    bookkeeping is done under a lock.
    """

    def __init__(
        self,
        requests_per_second: float,
        *,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self._interval = 1.0 / requests_per_second
        self._monotonic = monotonic
        self._sleep = sleep
        self._lock = Lock()
        self._next_slot: float | None = None

    @property
    def interval(self) -> float:
        return self._interval

    def acquire(self) -> None:
        with self._lock:
            now = self._monotonic()
            if self._next_slot is not None and self._next_slot > now:
                self._sleep(self._next_slot - now)
                now = self._monotonic()
            self._next_slot = now + self._interval
