import pytest

from tests.helpers import MISSING_ID, actor_for
from tutorlink.core.enums import NotificationType, SessionStatus
from tutorlink.core.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotAuthorizedException,
    NotFoundException,
)
from tutorlink.models import Notification
from tutorlink.services.review_service import ReviewService


@pytest.fixture
def service(db, clock) -> ReviewService:
    return ReviewService(db, clock)


def test_review_updates_rating_and_notifies(db, service, tutor, student, make_user, make_session):
    first = make_session(tutor, student, start="14:00", status=SessionStatus.COMPLETED)
    other = make_user()
    second = make_session(tutor, other, start="15:00", status=SessionStatus.COMPLETED)

    service.create_review(actor_for(student), first.id, 5, "Great")
    service.create_review(actor_for(other), second.id, 4, "Good")

    assert first.reviewed is True
    assert tutor.review_count == 2
    assert tutor.rating == 4.5
    notes = db.query(Notification).filter_by(type=NotificationType.REVIEW.value).all()
    assert {n.message for n in notes} == {"You received a 5-star review", "You received a 4-star review"}
    assert all(n.recipient_id == tutor.user_id for n in notes)


def test_rating_rounds_to_one_decimal(service, tutor, make_user, make_session):
    for i, rating in enumerate([5, 4, 4]):
        reviewer = make_user()
        session = make_session(
            tutor, reviewer, start=f"1{i}:00", status=SessionStatus.COMPLETED
        )
        service.create_review(actor_for(reviewer), session.id, rating, "ok")
    assert tutor.rating == 4.3


def test_only_completed_sessions(service, tutor, student, make_session):
    session = make_session(tutor, student, status=SessionStatus.CONFIRMED)
    with pytest.raises(BusinessRuleException):
        service.create_review(actor_for(student), session.id, 5, "Early")


def test_only_once(service, tutor, student, make_session):
    session = make_session(tutor, student, status=SessionStatus.COMPLETED)
    service.create_review(actor_for(student), session.id, 5, "Great")
    with pytest.raises(ConflictException):
        service.create_review(actor_for(student), session.id, 1, "Changed my mind")


def test_only_the_sessions_student(service, tutor, student, make_user, make_session, tutor_actor):
    session = make_session(tutor, student, status=SessionStatus.COMPLETED)
    with pytest.raises(NotAuthorizedException):
        service.create_review(actor_for(make_user()), session.id, 5, "Not mine")
    with pytest.raises(NotAuthorizedException):
        service.create_review(tutor_actor, session.id, 5, "Self review")


def test_unknown_session(service, student):
    with pytest.raises(NotFoundException):
        service.create_review(actor_for(student), MISSING_ID, 5, "?")


def test_pending_reviews(service, tutor, student, make_session):
    done = make_session(tutor, student, start="14:00", status=SessionStatus.COMPLETED)
    make_session(tutor, student, start="15:00", status=SessionStatus.CONFIRMED)
    assert [s.id for s in service.pending_reviews(actor_for(student))] == [done.id]

    service.create_review(actor_for(student), done.id, 3, "Fine")
    assert service.pending_reviews(actor_for(student)) == []


def test_reviews_for_tutor(service, tutor, student, make_session):
    session = make_session(tutor, student, status=SessionStatus.COMPLETED)
    service.create_review(actor_for(student), session.id, 4, "Nice")
    reviews = service.reviews_for_tutor(tutor.id)
    assert [(r.rating, r.comment) for r in reviews] == [(4, "Nice")]
    with pytest.raises(NotFoundException):
        service.reviews_for_tutor(MISSING_ID)
