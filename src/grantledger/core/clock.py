from __future__ import annotations

import logging
import time
from typing import Callable

from .constants import SECONDS_PER_DAY, TODAY, UINT32_MAX

logger = logging.getLogger(__name__)


class LedgerClock:
    """
    Day-number clock used by the vesting engine.

    ``time_provider`` returns a Unix timestamp in seconds. Day numbers are
    ``timestamp // 86400``. Reads never go backwards: if the provider reports
    an earlier day than one already observed, the last observed day is kept.
    """

    def __init__(self, time_provider: Callable[[], float] | None = None):
        self._time_provider = time_provider or time.time
        self._last_day = 0
        logger.debug("LedgerClock initialized with custom time provider: %s", bool(time_provider))

    def _current_time(self) -> int:
        timestamp = self._time_provider()
        try:
            return int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ValueError("time_provider must return a numeric timestamp") from exc

    def today(self) -> int:
        day = self._current_time() // SECONDS_PER_DAY
        if day > UINT32_MAX:
            raise ValueError(f"day number {day} does not fit in 32 bits")
        if day < self._last_day:
            logger.warning(
                "Clock moved backwards, keeping last observed day",
                extra={"event": "clock.backwards", "observed": day, "kept": self._last_day},
            )
            return self._last_day
        self._last_day = day
        return day

    def effective_day(self, on_day_or_today: int) -> int:
        """Resolve the ``TODAY`` sentinel (0) to the current day number."""
        return self.today() if on_day_or_today == TODAY else on_day_or_today

    @property
    def last_day(self) -> int:
        return self._last_day

    def resume_from(self, day: int) -> None:
        """Continue from a day observed in an earlier session."""
        self._last_day = max(self._last_day, day)


class FixedClock(LedgerClock):
    """Clock pinned to a given day number; used by the CLI ``--day`` option and tests."""

    def __init__(self, day: int):
        super().__init__(time_provider=lambda: self.day * SECONDS_PER_DAY)
        self.day = day

    def advance(self, days: int = 1) -> int:
        self.day += days
        return self.day
