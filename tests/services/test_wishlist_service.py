import pytest

from tests.helpers import MISSING_ID, actor_for
from tutorlink.core.enums import RoleName
from tutorlink.core.exceptions import ConflictException, NotAuthorizedException, NotFoundException
from tutorlink.models import WishlistItem
from tutorlink.services.wishlist_service import WishlistService


@pytest.fixture
def service(db, clock) -> WishlistService:
    return WishlistService(db, clock)


def test_add_and_list(service, tutor, make_tutor, student_actor):
    other = make_tutor(name="Otto Other")

    service.add_tutor(student_actor, tutor.id)
    service.add_tutor(student_actor, other.id)

    items = service.list_items(student_actor)
    assert {item.tutor_id for item in items} == {tutor.id, other.id}
    assert all(item.student_id == student_actor.user_id for item in items)


def test_duplicate_is_rejected(service, tutor, student_actor):
    service.add_tutor(student_actor, tutor.id)
    with pytest.raises(ConflictException) as exc_info:
        service.add_tutor(student_actor, tutor.id)
    assert exc_info.value.code == "ALREADY_IN_WISHLIST"


def test_unknown_tutor(service, student_actor):
    with pytest.raises(NotFoundException):
        service.add_tutor(student_actor, MISSING_ID)


def test_remove(db, service, tutor, student_actor):
    service.add_tutor(student_actor, tutor.id)

    service.remove_tutor(student_actor, tutor.id)

    assert db.query(WishlistItem).count() == 0
    with pytest.raises(NotFoundException):
        service.remove_tutor(student_actor, tutor.id)


def test_lists_are_per_student(service, tutor, student_actor, make_user):
    other = actor_for(make_user(RoleName.STUDENT))
    service.add_tutor(student_actor, tutor.id)

    assert service.list_items(other) == []


def test_students_only(service, tutor, tutor_actor, admin_actor):
    for actor in (tutor_actor, admin_actor):
        with pytest.raises(NotAuthorizedException):
            service.add_tutor(actor, tutor.id)
        with pytest.raises(NotAuthorizedException):
            service.list_items(actor)
