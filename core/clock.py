"""Clock sources for time-based exit rules."""

from datetime import datetime, timedelta
from typing import Optional, Union


class SystemClock:
    """Wall-clock time in the local timezone"""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock:
    """Clock that only moves when told to; used for replays and tests"""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 2, 9, 30)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: Union[int, float, timedelta]) -> datetime:
        if not isinstance(seconds, timedelta):
            seconds = timedelta(seconds=seconds)
        if seconds < timedelta(0):
            raise ValueError("clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, when: datetime) -> datetime:
        if when < self._now:
            raise ValueError(f"clock cannot move backwards from {self._now} to {when}")
        self._now = when
        return self._now
