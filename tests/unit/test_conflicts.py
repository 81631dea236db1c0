from datetime import time

import pytest

from tutorlink.domain.conflicts import has_conflict, overlaps, session_interval


def test_identical_intervals_conflict() -> None:
    assert has_conflict(600, 660, [(600, 660)])


def test_back_to_back_intervals_do_not_conflict() -> None:
    assert not has_conflict(600, 660, [(660, 720)])
    assert not has_conflict(660, 720, [(600, 660)])


@pytest.mark.parametrize(
    "candidate, existing, expected",
    [
        ((870, 930), (840, 900), True),  # 14:30-15:30 vs 14:00-15:00
        ((900, 960), (840, 900), False),  # 15:00-16:00 vs 14:00-15:00
        ((840, 960), (870, 900), True),  # containment
        ((870, 900), (840, 960), True),
        ((600, 630), (700, 760), False),
    ],
)
def test_overlap_cases(candidate, existing, expected) -> None:
    assert has_conflict(*candidate, [existing]) is expected


def test_overlap_is_symmetric() -> None:
    assert overlaps(time(10), time(11), time(10, 30), time(12)) == overlaps(
        time(10, 30), time(12), time(10), time(11)
    )


def test_no_existing_sessions_means_no_conflict() -> None:
    assert not has_conflict(600, 660, [])


def test_session_interval_in_minutes() -> None:
    assert session_interval(time(14, 30), 90) == (870, 960)
