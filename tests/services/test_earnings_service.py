from datetime import timedelta
from decimal import Decimal

import pytest

from tests.helpers import MISSING_ID, NOW, actor_for
from tutorlink.core.enums import SessionStatus
from tutorlink.core.exceptions import NotAuthorizedException, NotFoundException
from tutorlink.services.earnings_service import EarningsService


@pytest.fixture
def service(db, clock) -> EarningsService:
    return EarningsService(db, clock)


def _days_ago(days: int):
    return (NOW - timedelta(days=days)).date()


def test_weekly_monthly_and_total(service, tutor, tutor_actor, student, make_session):
    make_session(
        tutor, student, session_date=_days_ago(3), status=SessionStatus.COMPLETED, price=Decimal("50")
    )
    make_session(
        tutor, student, session_date=_days_ago(20), status=SessionStatus.COMPLETED, price=Decimal("20")
    )
    make_session(
        tutor, student, session_date=_days_ago(40), status=SessionStatus.COMPLETED, price=Decimal("15")
    )
    make_session(tutor, student, session_date=_days_ago(1), status=SessionStatus.PENDING)
    make_session(tutor, student, session_date=_days_ago(2), status=SessionStatus.CANCELLED)

    summary = service.get_earnings(tutor_actor)

    assert summary.weekly_earnings == Decimal("50")
    assert summary.monthly_earnings == Decimal("70")
    assert summary.total_earnings == Decimal("85")
    assert (summary.completed_sessions, summary.pending_sessions, summary.cancelled_sessions) == (3, 1, 1)


def test_clock_moves_the_windows(service, clock, tutor, tutor_actor, student, make_session):
    make_session(
        tutor, student, session_date=_days_ago(3), status=SessionStatus.COMPLETED, price=Decimal("50")
    )
    clock.set(NOW + timedelta(days=10))
    summary = service.get_earnings(tutor_actor)
    assert summary.weekly_earnings == Decimal("0")
    assert summary.monthly_earnings == Decimal("50")


def test_admin_reads_any_tutor(service, tutor, admin_actor):
    assert service.get_earnings(admin_actor, tutor.id).total_earnings == Decimal("0")


def test_other_tutor_and_students_are_refused(service, tutor, make_tutor, student_actor):
    other = make_tutor()
    with pytest.raises(NotAuthorizedException):
        service.get_earnings(actor_for(other.user), tutor.id)
    with pytest.raises(NotAuthorizedException):
        service.get_earnings(student_actor)


def test_unknown_tutor(service, admin_actor):
    with pytest.raises(NotFoundException):
        service.get_earnings(admin_actor, MISSING_ID)
