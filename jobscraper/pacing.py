"""Request pacing and per-run time budgets."""
from __future__ import annotations

import time
from typing import Callable

from jobscraper.log import get_logger

log = get_logger(__name__)


class RateLimiter:
    """Enforces a minimum interval between consecutive calls to ``wait``."""

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        label: str = "",
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._label = label
        self._last: float | None = None

    def wait(self) -> float:
        """Block until the interval has passed; returns seconds slept."""
        waited = 0.0
        if self._last is not None:
            elapsed = self._clock() - self._last
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                log.debug("%s rate limiting: waiting %.2fs", self._label or "request", waited)
                self._sleep(waited)
        self._last = self._clock()
        return waited


class Deadline:
    """Wall-clock budget for one run; ``None`` seconds means unbounded."""

    def __init__(self, seconds: float | None, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._end = None if seconds is None else clock() + seconds

    @property
    def remaining(self) -> float | None:
        if self._end is None:
            return None
        return max(self._end - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self._end is not None and self._clock() >= self._end
