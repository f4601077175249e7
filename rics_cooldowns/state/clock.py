"""
Game calendar access.

The cooldown manager only ever needs "how many whole days have passed
since the game started". Hosts supply that through a GameClock so the
manager never reaches into a global calendar.
"""

from typing import Callable, Protocol, runtime_checkable


TICKS_PER_DAY = 60000


@runtime_checkable
class GameClock(Protocol):
    """Source of the current in-game day."""

    def current_day(self) -> int:
        """Whole days elapsed since game start."""
        ...


class ElapsedDaysClock:
    """
    Clock backed by the host's tick counter.

    Partial days are truncated; time of day never matters for cooldowns.
    """

    def __init__(self, ticks: Callable[[], int], ticks_per_day: int = TICKS_PER_DAY):
        self._ticks = ticks
        self.ticks_per_day = ticks_per_day

    def current_day(self) -> int:
        return max(0, self._ticks()) // self.ticks_per_day


class FixedClock:
    """Settable clock for tests and offline tools."""

    def __init__(self, day: int = 0):
        self.day = day

    def current_day(self) -> int:
        return self.day

    def advance(self, days: int = 1) -> int:
        """Move forward and return the new day."""
        self.day += days
        return self.day
