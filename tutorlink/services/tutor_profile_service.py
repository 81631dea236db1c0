# tutorlink/services/tutor_profile_service.py
"""
Tutor directory and profile management.

Students browse verified tutors by subject, city, rate and rating. Tutors
create and edit their own profile; a new profile starts pending
verification. When a tutor changes their hourly rate, students with
upcoming sessions and students who saved the tutor are told. Sessions
already booked keep the price they were booked at.
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import NotificationType, RelatedModel, VerificationStatus
from ..core.exceptions import ConflictException, NotAuthorizedException, NotFoundException
from ..models.tutor import TutorProfile
from ..principal import Actor
from ..repositories import RepositoryFactory
from ..schemas.tutor import SubjectIn, TutorProfileCreate, TutorProfileUpdate
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

RATE_CHANGE_MESSAGE = "{name} changed their hourly rate from {old} to {new}"


def _subject_pairs(subjects: List[SubjectIn]) -> List[Tuple[str, str]]:
    """(name, level) pairs with repeated names dropped, first one wins."""
    seen = set()
    pairs = []
    for subject in subjects:
        key = subject.name.lower()
        if key in seen:
            continue
        seen.add(key)
        pairs.append((subject.name, subject.proficiency_level.value))
    return pairs


class TutorProfileService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db, clock)
        self.notification_service = notification_service or NotificationService(db, self.clock)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.wishlist_repository = RepositoryFactory.create_wishlist_repository(db)

    # Directory

    @BaseService.measure_operation("search_tutors")
    def search_tutors(
        self,
        subject: Optional[str] = None,
        city: Optional[str] = None,
        min_rate: Optional[Decimal] = None,
        max_rate: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[TutorProfile], int]:
        """Verified tutors matching the filters, one page at a time."""
        return self.tutor_repository.search_verified(
            subject=(subject or "").strip() or None,
            city=(city or "").strip() or None,
            min_rate=min_rate,
            max_rate=max_rate,
            min_rating=min_rating,
            skip=(page - 1) * limit,
            limit=limit,
        )

    @BaseService.measure_operation("get_tutor")
    def get_tutor(self, tutor_id: str) -> TutorProfile:
        tutor = self.tutor_repository.get_by_id(tutor_id)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        return tutor

    # Own profile

    def get_my_profile(self, actor: Actor) -> TutorProfile:
        if not actor.is_tutor:
            raise NotAuthorizedException("Only tutors have a tutor profile")
        tutor = self.tutor_repository.get_by_user_id(actor.user_id)
        if tutor is None:
            raise NotFoundException("Tutor profile not found")
        return tutor

    @BaseService.measure_operation("create_tutor_profile")
    def create_profile(self, actor: Actor, data: TutorProfileCreate) -> TutorProfile:
        """
        Create the calling tutor's profile, pending verification.

        Raises:
            NotAuthorizedException: Caller is not a tutor
            ConflictException: The tutor already has a profile
        """
        if not actor.is_tutor:
            raise NotAuthorizedException("Only tutors can create a tutor profile")
        if self.tutor_repository.get_by_user_id(actor.user_id) is not None:
            raise ConflictException("Tutor profile already exists", code="PROFILE_EXISTS")

        with self.transaction():
            tutor = self.tutor_repository.create(
                user_id=actor.user_id,
                hourly_rate=data.hourly_rate,
                city=data.city,
                bio=data.bio,
                teaching_mode=data.teaching_mode.value,
                verification_status=VerificationStatus.PENDING.value,
            )
            self.tutor_repository.replace_subjects(tutor, _subject_pairs(data.subjects))

        self.log_operation("create_tutor_profile", tutor_id=tutor.id, user_id=actor.user_id)
        return self.tutor_repository.get_by_id(tutor.id)

    @BaseService.measure_operation("update_tutor_profile")
    def update_profile(self, actor: Actor, data: TutorProfileUpdate) -> TutorProfile:
        """
        Apply the fields present in ``data`` to the calling tutor's profile.

        Subjects, when given, replace the current list.
        """
        tutor = self.get_my_profile(actor)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        subjects = changes.pop("subjects", None)
        old_rate = Decimal(str(tutor.hourly_rate or 0))

        with self.transaction():
            for field, value in changes.items():
                setattr(tutor, field, getattr(value, "value", value))
            if subjects is not None:
                self.tutor_repository.replace_subjects(tutor, _subject_pairs(data.subjects))
            self.db.flush()

        self.log_operation(
            "update_tutor_profile",
            tutor_id=tutor.id,
            user_id=actor.user_id,
            fields=sorted(changes) + (["subjects"] if subjects is not None else []),
        )

        new_rate = data.hourly_rate
        if new_rate is not None and new_rate != old_rate:
            self._announce_rate_change(actor, tutor, old_rate, new_rate)
        return tutor

    def _announce_rate_change(
        self, actor: Actor, tutor: TutorProfile, old_rate: Decimal, new_rate: Decimal
    ) -> None:
        today = self.clock.now().date()
        recipients = set(self.session_repository.student_ids_with_upcoming(tutor.id, today))
        recipients.update(self.wishlist_repository.student_ids_for_tutor(tutor.id))
        if not recipients:
            return

        name = tutor.user.name if tutor.user is not None else "Your tutor"
        message = RATE_CHANGE_MESSAGE.format(
            name=name, old=f"{old_rate:.2f}", new=f"{Decimal(new_rate):.2f}"
        )
        logger.info(f"Rate change for tutor {tutor.id} announced to {len(recipients)} students")
        for student_id in sorted(recipients):
            self.notification_service.notify(
                recipient_id=student_id,
                notification_type=NotificationType.RATE_CHANGE,
                message=message,
                sender_id=actor.user_id,
                related_id=tutor.id,
                related_model=RelatedModel.TUTOR,
            )
