# tutorlink/domain/conflicts.py
"""Overlap detection between a candidate booking and existing sessions."""

from datetime import time
from typing import Iterable, Tuple, TypeVar

from .availability import to_minutes

T = TypeVar("T", int, float, time)

Interval = Tuple[int, int]


def overlaps(start_a: T, end_a: T, start_b: T, end_b: T) -> bool:
    """Half-open intervals overlap; touching endpoints do not."""
    return start_a < end_b and start_b < end_a


def has_conflict(candidate_start: int, candidate_end: int, existing: Iterable[Interval]) -> bool:
    """True if ``[candidate_start, candidate_end)`` overlaps any existing interval."""
    return any(overlaps(candidate_start, candidate_end, s, e) for s, e in existing)


def session_interval(start: time, duration_minutes: int) -> Interval:
    """Minutes-since-midnight interval for a session on its date."""
    begin = to_minutes(start)
    return begin, begin + duration_minutes
