import pytest

from tests.helpers import MISSING_ID
from tutorlink.core.enums import NotificationType, VerificationStatus
from tutorlink.core.exceptions import NotAuthorizedException, NotFoundException, ValidationException
from tutorlink.models import Notification
from tutorlink.services.verification_service import VERIFIED_MESSAGE, VerificationService


@pytest.fixture
def service(db, clock) -> VerificationService:
    return VerificationService(db, clock)


@pytest.fixture
def pending_tutor(make_tutor):
    return make_tutor(verification_status=VerificationStatus.PENDING)


def test_verify_stamps_time_and_notifies(db, service, clock, pending_tutor, admin_actor):
    tutor = service.verify_tutor(admin_actor, pending_tutor.id, VerificationStatus.VERIFIED)

    assert tutor.verification_status == VerificationStatus.VERIFIED.value
    assert tutor.verified_at == clock.now()
    note = db.query(Notification).one()
    assert note.recipient_id == pending_tutor.user_id
    assert note.type == NotificationType.VERIFICATION.value
    assert note.message == VERIFIED_MESSAGE


def test_reject_carries_reason(db, service, pending_tutor, admin_actor):
    tutor = service.verify_tutor(
        admin_actor, pending_tutor.id, VerificationStatus.REJECTED, "  Missing credentials "
    )
    assert tutor.verified_at is None
    assert tutor.verification_comment == "Missing credentials"
    note = db.query(Notification).one()
    assert note.message == "Your tutor profile verification was rejected. Reason: Missing credentials"


def test_admin_only(service, pending_tutor, tutor_actor, student_actor):
    for actor in (tutor_actor, student_actor):
        with pytest.raises(NotAuthorizedException):
            service.verify_tutor(actor, pending_tutor.id, VerificationStatus.VERIFIED)
        with pytest.raises(NotAuthorizedException):
            service.pending_verifications(actor)


def test_pending_is_not_a_decision(service, pending_tutor, admin_actor):
    with pytest.raises(ValidationException):
        service.verify_tutor(admin_actor, pending_tutor.id, VerificationStatus.PENDING)


def test_unknown_tutor(service, admin_actor):
    with pytest.raises(NotFoundException):
        service.verify_tutor(admin_actor, MISSING_ID, VerificationStatus.VERIFIED)


def test_pending_list_and_stats(service, tutor, pending_tutor, make_tutor, admin_actor):
    make_tutor(verification_status=VerificationStatus.REJECTED)

    assert [t.id for t in service.pending_verifications(admin_actor)] == [pending_tutor.id]
    assert service.verification_stats(admin_actor) == {
        "pending": 1,
        "verified": 1,
        "rejected": 1,
        "total": 3,
    }
