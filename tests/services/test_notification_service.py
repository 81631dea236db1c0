import pytest

from tests.helpers import MISSING_ID, actor_for
from tutorlink.core.enums import NotificationType, RelatedModel
from tutorlink.core.exceptions import NotAuthorizedException, NotFoundException
from tutorlink.models import Notification
from tutorlink.services.notification_service import NotificationService


@pytest.fixture
def service(db, clock) -> NotificationService:
    return NotificationService(db, clock)


def _notify(service, recipient, message="hello"):
    return service.notify(
        recipient_id=recipient.id,
        notification_type=NotificationType.SESSION_UPDATE,
        message=message,
        related_model=RelatedModel.SESSION,
    )


def test_list_is_newest_first_with_unread_count(service, student):
    first = _notify(service, student, "first")
    second = _notify(service, student, "second")
    service.mark_read(actor_for(student), first.id)

    items, unread = service.list_for_user(actor_for(student))

    assert [n.id for n in items] == [second.id, first.id]
    assert unread == 1


def test_mark_all_read_only_touches_own(db, service, student, make_user):
    other = make_user()
    _notify(service, student)
    _notify(service, student)
    _notify(service, other)

    assert service.mark_all_read(actor_for(student)) == 2
    assert db.query(Notification).filter_by(recipient_id=other.id, read=False).count() == 1
    _, unread = service.list_for_user(actor_for(student))
    assert unread == 0


def test_cannot_touch_someone_elses_notification(service, student, make_user):
    note = _notify(service, student)
    intruder = actor_for(make_user())

    with pytest.raises(NotAuthorizedException):
        service.mark_read(intruder, note.id)
    with pytest.raises(NotAuthorizedException):
        service.delete(intruder, note.id)


def test_delete_own(db, service, student):
    note = _notify(service, student)
    service.delete(actor_for(student), note.id)
    assert db.query(Notification).count() == 0


def test_missing_notification(service, student):
    with pytest.raises(NotFoundException):
        service.mark_read(actor_for(student), MISSING_ID)


def test_notify_swallows_storage_errors(service, student, monkeypatch):
    def _boom(**kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(service.repository, "create", _boom)
    assert _notify(service, student) is None
