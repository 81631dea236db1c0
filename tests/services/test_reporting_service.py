from datetime import date, datetime
from decimal import Decimal

import pytest

from tutorlink.core.enums import RoleName, SessionStatus
from tutorlink.core.exceptions import NotAuthorizedException
from tutorlink.models import User
from tutorlink.services.reporting_service import ReportingService, completion_rate


@pytest.fixture
def service(db, clock) -> ReportingService:
    return ReportingService(db, clock)


def test_session_stats(service, tutor, student, admin_actor, make_session):
    make_session(tutor, student, session_date=date(2025, 5, 5), status=SessionStatus.COMPLETED)
    make_session(tutor, student, session_date=date(2025, 5, 12), status=SessionStatus.COMPLETED)
    make_session(
        tutor, student, session_date=date(2025, 6, 9), status=SessionStatus.CANCELLED, subject="Physics"
    )
    make_session(tutor, student, session_date=date(2025, 6, 9), start="15:00")

    stats = service.session_stats(admin_actor)

    assert stats["status_counts"] == {"pending": 1, "confirmed": 0, "completed": 2, "cancelled": 1}
    assert stats["top_subjects"][0] == {"name": "Mathematics", "count": 3}
    assert stats["sessions_by_month"] == [
        {"month": "2025-05", "count": 2},
        {"month": "2025-06", "count": 2},
    ]
    assert stats["completion_rate"] == 66.67


def test_platform_stats(db, service, tutor, student, admin, admin_actor, make_session):
    make_session(tutor, student, start="14:00", status=SessionStatus.COMPLETED, price=Decimal("40"))
    make_session(tutor, student, start="15:00", status=SessionStatus.COMPLETED, price=Decimal("35.50"))
    make_session(tutor, student, session_date=date(2025, 6, 16), price=Decimal("99"))
    tutor.rating = 4.5
    tutor.review_count = 2
    db.commit()

    stats = service.platform_stats(admin_actor)

    assert stats["users_by_role"] == {
        RoleName.ADMIN.value: 1,
        RoleName.TUTOR.value: 1,
        RoleName.STUDENT.value: 1,
    }
    assert stats["total_sessions"] == 3
    assert stats["total_revenue"] == 75.5
    assert stats["average_rating"] == 4.5


def test_admin_only(service, student_actor, tutor_actor):
    for actor in (student_actor, tutor_actor):
        with pytest.raises(NotAuthorizedException):
            service.session_stats(actor)
        with pytest.raises(NotAuthorizedException):
            service.platform_stats(actor)
        with pytest.raises(NotAuthorizedException):
            service.list_users(actor)
        with pytest.raises(NotAuthorizedException):
            service.user_stats(actor)


@pytest.mark.parametrize(
    "completed, cancelled, expected", [(0, 0, 0.0), (1, 0, 100.0), (1, 2, 33.33), (3, 1, 75.0)]
)
def test_completion_rate(completed, cancelled, expected):
    assert completion_rate(completed, cancelled) == expected


def test_list_users_filters_and_pages(service, admin_actor, make_user):
    make_user(RoleName.STUDENT, name="Maria Silva")
    make_user(RoleName.STUDENT, name="Mario Rossi")
    make_user(RoleName.TUTOR, name="Marina Costa")
    make_user(RoleName.STUDENT, name="John Doe")

    users, total = service.list_users(admin_actor, role=RoleName.STUDENT, search="MARI")
    assert total == 2
    assert {u.name for u in users} == {"Maria Silva", "Mario Rossi"}

    users, total = service.list_users(admin_actor, page=2, limit=3)
    assert total == 5  # four above plus the admin
    assert len(users) == 2


def test_list_users_matches_email(service, admin_actor, make_user):
    user = make_user(RoleName.TUTOR)

    users, total = service.list_users(admin_actor, search=user.email.upper())

    assert total == 1
    assert users[0].id == user.id


def test_user_stats(db, service, admin_actor, make_user):
    signups = [
        make_user(RoleName.STUDENT, city="Porto"),
        make_user(RoleName.STUDENT, city="Porto"),
        make_user(RoleName.TUTOR, city="Lisbon"),
        make_user(RoleName.STUDENT, city=""),
    ]
    for user, created in zip(signups, [(2025, 4, 3), (2025, 5, 1), (2025, 5, 20), (2025, 5, 21)]):
        user.created_at = datetime(*created)
    db.commit()
    admin = db.query(User).filter_by(id=admin_actor.user_id).one()
    admin.created_at = datetime(2025, 1, 15)
    db.commit()

    stats = service.user_stats(admin_actor)

    assert stats["users_by_role"] == {"admin": 1, "tutor": 1, "student": 3}
    assert stats["total_users"] == 5
    assert stats["top_cities"] == [{"name": "Porto", "count": 2}, {"name": "Lisbon", "count": 1}]
    assert stats["signups_by_month"] == [
        {"month": "2025-01", "count": 1},
        {"month": "2025-04", "count": 1},
        {"month": "2025-05", "count": 3},
    ]
