from datetime import time

import pytest

from tests.helpers import MISSING_ID, MONDAY, TUESDAY, actor_for
from tutorlink.core.enums import DayOfWeek, SessionStatus, VerificationStatus
from tutorlink.core.exceptions import (
    NotAuthorizedException,
    NotFoundException,
    TutorUnavailableException,
    ValidationException,
)
from tutorlink.domain.availability import AvailabilityWindow
from tutorlink.models import WeeklyAvailability
from tutorlink.services.availability_service import AvailabilityService


@pytest.fixture
def service(db, clock) -> AvailabilityService:
    return AvailabilityService(db, clock, granularity_minutes=30)


def _window(day: str, start: str, end: str) -> AvailabilityWindow:
    return AvailabilityWindow(
        day_of_week=DayOfWeek(day),
        start_time=time.fromisoformat(start) if start else None,
        end_time=time.fromisoformat(end) if end else None,
    )


class TestAvailableSlots:
    def test_open_window_without_sessions(self, service, tutor):
        assert service.get_available_slots(tutor.id, MONDAY) == ["14:00", "14:30", "15:00", "15:30"]

    def test_booked_time_is_removed(self, service, tutor, student, make_session):
        make_session(tutor, student, start="14:00", duration=60)
        assert service.get_available_slots(tutor.id, MONDAY) == ["15:00", "15:30"]

    def test_partial_overlap_removes_slot(self, service, tutor, student, make_session):
        make_session(tutor, student, start="14:45", duration=30)
        assert service.get_available_slots(tutor.id, MONDAY) == ["14:00", "15:30"]

    def test_cancelled_and_completed_sessions_free_the_slot(
        self, service, tutor, student, make_session
    ):
        make_session(tutor, student, start="14:00", status=SessionStatus.CANCELLED)
        make_session(tutor, student, start="15:00", status=SessionStatus.COMPLETED)
        assert service.get_available_slots(tutor.id, MONDAY) == ["14:00", "14:30", "15:00", "15:30"]

    def test_day_without_window_is_empty(self, service, tutor):
        assert service.get_available_slots(tutor.id, TUESDAY) == []

    def test_granularity_is_configurable(self, db, clock, tutor):
        hourly = AvailabilityService(db, clock, granularity_minutes=60)
        assert hourly.get_available_slots(tutor.id, MONDAY) == ["14:00", "15:00"]

    def test_unverified_or_unknown_tutor(self, service, make_tutor):
        pending = make_tutor(
            windows={"monday": ("14:00", "16:00")},
            verification_status=VerificationStatus.PENDING,
        )
        with pytest.raises(TutorUnavailableException):
            service.get_available_slots(pending.id, MONDAY)
        with pytest.raises(TutorUnavailableException):
            service.get_available_slots(MISSING_ID, MONDAY)


class TestReplaceAvailability:
    def test_owner_replaces_windows(self, db, service, tutor, tutor_actor):
        saved = service.replace_availability(
            tutor_actor,
            tutor.id,
            [_window("friday", "10:00", "12:00"), _window("tuesday", "09:00", "11:00")],
        )

        assert [w.day_of_week for w in saved] == [DayOfWeek.TUESDAY, DayOfWeek.FRIDAY]
        rows = db.query(WeeklyAvailability).filter_by(tutor_id=tutor.id).all()
        assert sorted(r.day_of_week for r in rows) == ["friday", "tuesday"]
        assert service.get_available_slots(tutor.id, MONDAY) == []

    def test_entries_missing_times_are_dropped(self, service, tutor, tutor_actor):
        saved = service.replace_availability(
            tutor_actor,
            tutor.id,
            [_window("monday", "09:00", "10:00"), _window("wednesday", None, "12:00")],
        )
        assert [w.day_of_week for w in saved] == [DayOfWeek.MONDAY]

    def test_inverted_window_rejected(self, service, tutor, tutor_actor):
        with pytest.raises(ValidationException):
            service.replace_availability(tutor_actor, tutor.id, [_window("monday", "12:00", "10:00")])
        assert [w.describe() for w in service.get_availability(tutor.id)] == ["14:00-16:00"]

    def test_duplicate_day_rejected(self, service, tutor, tutor_actor):
        with pytest.raises(ValidationException):
            service.replace_availability(
                tutor_actor,
                tutor.id,
                [_window("monday", "09:00", "10:00"), _window("monday", "11:00", "12:00")],
            )

    def test_admin_may_edit_but_other_tutor_may_not(
        self, service, tutor, make_tutor, admin_actor
    ):
        service.replace_availability(admin_actor, tutor.id, [_window("sunday", "08:00", "09:00")])
        other = make_tutor()
        with pytest.raises(NotAuthorizedException):
            service.replace_availability(
                actor_for(other.user), tutor.id, [_window("monday", "08:00", "09:00")]
            )

    def test_student_may_not_edit(self, service, tutor, student_actor):
        with pytest.raises(NotAuthorizedException):
            service.replace_availability(student_actor, tutor.id, [])

    def test_unknown_tutor(self, service, admin_actor):
        with pytest.raises(NotFoundException):
            service.replace_availability(admin_actor, MISSING_ID, [])
