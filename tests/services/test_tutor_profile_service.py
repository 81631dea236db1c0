from datetime import date
from decimal import Decimal

import pytest

from tests.helpers import MISSING_ID, MONDAY
from tutorlink.core.enums import (
    NotificationType,
    ProficiencyLevel,
    RoleName,
    SessionStatus,
    TeachingMode,
    VerificationStatus,
)
from tutorlink.core.exceptions import ConflictException, NotAuthorizedException, NotFoundException
from tutorlink.models import Notification, WishlistItem
from tutorlink.principal import Actor
from tutorlink.schemas.tutor import TutorProfileCreate, TutorProfileUpdate
from tutorlink.services.tutor_profile_service import TutorProfileService


@pytest.fixture
def service(db, clock) -> TutorProfileService:
    return TutorProfileService(db, clock)


@pytest.fixture
def new_tutor_actor(make_user) -> Actor:
    """A tutor account that has not set up a profile yet."""
    user = make_user(RoleName.TUTOR, name="Nia New")
    return Actor(user_id=user.id, role=RoleName.TUTOR)


def _profile(**overrides) -> TutorProfileCreate:
    data = {
        "subjects": ["Physics", {"name": "Chemistry", "proficiency_level": "advanced"}],
        "hourly_rate": "45.00",
        "city": "Lisbon",
        "bio": "Ten years teaching high school science.",
        "teaching_mode": "online",
    }
    data.update(overrides)
    return TutorProfileCreate(**data)


class TestSearch:
    def test_only_verified_best_rated_first(self, db, service, make_tutor):
        low = make_tutor(name="Low")
        high = make_tutor(name="High")
        make_tutor(verification_status=VerificationStatus.PENDING)
        low.rating, high.rating = 3.5, 4.8
        db.commit()

        tutors, total = service.search_tutors()

        assert total == 2
        assert [t.id for t in tutors] == [high.id, low.id]

    def test_filters(self, service, make_tutor):
        match = make_tutor(subjects=["Organic Chemistry"], city="Porto", hourly_rate=Decimal("40"))
        make_tutor(subjects=["Organic Chemistry"], city="Lisbon", hourly_rate=Decimal("40"))
        make_tutor(subjects=["History"], city="Porto", hourly_rate=Decimal("40"))
        make_tutor(subjects=["Chemistry"], city="Porto", hourly_rate=Decimal("80"))

        tutors, total = service.search_tutors(
            subject="chemistry", city="porto", min_rate=Decimal("30"), max_rate=Decimal("50")
        )

        assert total == 1
        assert tutors[0].id == match.id

    def test_min_rating(self, db, service, make_tutor):
        good = make_tutor()
        make_tutor()
        good.rating = 4.2
        db.commit()

        tutors, _ = service.search_tutors(min_rating=4.0)

        assert [t.id for t in tutors] == [good.id]

    def test_pagination_keeps_total(self, service, make_tutor):
        for _ in range(5):
            make_tutor()

        tutors, total = service.search_tutors(page=2, limit=2)

        assert total == 5
        assert len(tutors) == 2


class TestDetail:
    def test_get_tutor(self, service, tutor):
        assert service.get_tutor(tutor.id).id == tutor.id

    def test_unknown_tutor(self, service):
        with pytest.raises(NotFoundException):
            service.get_tutor(MISSING_ID)


class TestCreateProfile:
    def test_creates_pending_profile(self, service, new_tutor_actor):
        tutor = service.create_profile(new_tutor_actor, _profile())

        assert tutor.user_id == new_tutor_actor.user_id
        assert tutor.verification_status == VerificationStatus.PENDING.value
        assert tutor.hourly_rate == Decimal("45.00")
        assert tutor.teaching_mode == TeachingMode.ONLINE.value
        assert sorted((s.name, s.proficiency_level) for s in tutor.subjects) == [
            ("Chemistry", ProficiencyLevel.ADVANCED.value),
            ("Physics", ProficiencyLevel.BEGINNER.value),
        ]

    def test_repeated_subject_names_are_dropped(self, service, new_tutor_actor):
        tutor = service.create_profile(
            new_tutor_actor, _profile(subjects=["Physics", " physics ", "Maths"])
        )
        assert sorted(s.name for s in tutor.subjects) == ["Maths", "Physics"]

    def test_second_profile_conflicts(self, service, new_tutor_actor):
        service.create_profile(new_tutor_actor, _profile())
        with pytest.raises(ConflictException) as exc_info:
            service.create_profile(new_tutor_actor, _profile())
        assert exc_info.value.code == "PROFILE_EXISTS"

    def test_students_cannot_create(self, service, student_actor):
        with pytest.raises(NotAuthorizedException):
            service.create_profile(student_actor, _profile())


class TestUpdateProfile:
    def test_partial_update(self, service, tutor, tutor_actor):
        updated = service.update_profile(tutor_actor, TutorProfileUpdate(bio="  New bio ", city="Braga"))

        assert updated.bio == "New bio"
        assert updated.city == "Braga"
        assert updated.hourly_rate == Decimal("50.00")
        assert [s.name for s in updated.subjects] == ["Mathematics"]

    def test_subjects_are_replaced(self, service, tutor, tutor_actor):
        updated = service.update_profile(
            tutor_actor, TutorProfileUpdate(subjects=["Statistics", "Calculus"])
        )
        assert sorted(s.name for s in updated.subjects) == ["Calculus", "Statistics"]

    def test_without_profile_is_404(self, service, new_tutor_actor):
        with pytest.raises(NotFoundException):
            service.update_profile(new_tutor_actor, TutorProfileUpdate(bio="x"))

    def test_rate_change_notifies_upcoming_students_and_followers(
        self, db, service, tutor, tutor_actor, student, make_user, make_session
    ):
        follower = make_user(RoleName.STUDENT)
        past_student = make_user(RoleName.STUDENT)
        cancelled_student = make_user(RoleName.STUDENT)
        make_session(tutor, student, session_date=MONDAY)
        make_session(tutor, past_student, session_date=date(2025, 5, 5), status=SessionStatus.COMPLETED)
        make_session(tutor, cancelled_student, session_date=MONDAY, status=SessionStatus.CANCELLED)
        db.add(WishlistItem(student_id=follower.id, tutor_id=tutor.id))
        db.commit()

        service.update_profile(tutor_actor, TutorProfileUpdate(hourly_rate="60"))

        notifications = db.query(Notification).all()
        assert sorted(n.recipient_id for n in notifications) == sorted([student.id, follower.id])
        for n in notifications:
            assert n.type == NotificationType.RATE_CHANGE.value
            assert n.related_id == tutor.id
            assert n.message == "Tess Tutor changed their hourly rate from 50.00 to 60.00"

    def test_rate_change_leaves_booked_prices(self, db, service, tutor, tutor_actor, student, make_session):
        session = make_session(tutor, student, price=Decimal("50.00"))

        service.update_profile(tutor_actor, TutorProfileUpdate(hourly_rate="75.00"))

        db.refresh(session)
        assert session.price == Decimal("50.00")
        assert tutor.hourly_rate == Decimal("75.00")

    def test_same_rate_sends_nothing(self, db, service, tutor, tutor_actor, student, make_session):
        make_session(tutor, student)

        service.update_profile(tutor_actor, TutorProfileUpdate(hourly_rate="50", bio="Same price"))

        assert db.query(Notification).count() == 0
