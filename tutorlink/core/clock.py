# tutorlink/core/clock.py
"""
Time source for services.

Services never call ``datetime.now()`` directly; they receive a Clock so
earnings windows and "upcoming" filters can be pinned in tests. Session
dates and start times are naive wall-clock values in platform-local time,
which is UTC.
"""

from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the system's UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock frozen at a given instant; ``set`` moves it."""

    def __init__(self, instant: datetime):
        self._instant = instant.replace(tzinfo=None)

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._instant.date()

    def set(self, instant: datetime) -> None:
        self._instant = instant.replace(tzinfo=None)


_system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency returning the process clock; override in tests."""
    return _system_clock
