# tutorlink/domain/availability.py
"""
Weekly availability windows and slot generation.

A window is a tutor's recurring open hours for one weekday. Slots are the
discrete start times a student may book inside that window on a given
date, spaced by a fixed granularity. Times are wall-clock ``HH:MM`` in
platform-local time; windows never cross midnight.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Iterator, List, Optional

from ..core.constants import DEFAULT_SLOT_GRANULARITY
from ..core.enums import DayOfWeek

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class AvailabilityWindow:
    day_of_week: DayOfWeek
    start_time: Optional[time]
    end_time: Optional[time]

    @property
    def is_bookable(self) -> bool:
        """A window with missing times or start >= end offers nothing."""
        if self.start_time is None or self.end_time is None:
            return False
        return self.start_time < self.end_time

    def contains(self, start: time, duration_minutes: int) -> bool:
        """True if ``[start, start + duration)`` lies inside the window."""
        if not self.is_bookable:
            return False
        begin = to_minutes(start)
        end = begin + duration_minutes
        return to_minutes(self.start_time) <= begin and end <= to_minutes(self.end_time)

    def describe(self) -> str:
        if self.start_time is None or self.end_time is None:
            return "unavailable"
        return f"{format_hhmm(self.start_time)}-{format_hhmm(self.end_time)}"


def parse_hhmm(value: str) -> time:
    """Parse a 24h ``HH:MM`` string; raises ValueError on anything else."""
    parts = (value or "").strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Time must be HH:MM, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return time(hours, minutes)


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(total: int) -> time:
    return time(total // 60, total % 60)


def day_of(on: date) -> DayOfWeek:
    return DayOfWeek.from_index(on.weekday())


def resolve_window(
    windows: Iterable[AvailabilityWindow], day: DayOfWeek
) -> Optional[AvailabilityWindow]:
    for window in windows:
        if window.day_of_week == day:
            return window
    return None


def iter_slots(
    window: Optional[AvailabilityWindow],
    granularity_minutes: int = DEFAULT_SLOT_GRANULARITY,
) -> Iterator[time]:
    """
    Yield bookable start times for a window.

    Starts at the window's start and steps by ``granularity_minutes`` while
    the slot ``[t, t + granularity)`` still ends at or before the window end.
    Yields nothing for a missing or non-bookable window.
    """
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")
    if window is None or not window.is_bookable:
        return
    current = to_minutes(window.start_time)
    end = to_minutes(window.end_time)
    while current + granularity_minutes <= end:
        yield from_minutes(current)
        current += granularity_minutes


def generate_slots(
    window: Optional[AvailabilityWindow],
    granularity_minutes: int = DEFAULT_SLOT_GRANULARITY,
) -> List[str]:
    """Slots for a window as ``HH:MM`` strings, in ascending order."""
    return [format_hhmm(t) for t in iter_slots(window, granularity_minutes)]
