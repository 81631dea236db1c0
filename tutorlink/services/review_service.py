# tutorlink/services/review_service.py
"""
Review Service for TutorLink

A student may review each completed session once. Saving a review marks
the session reviewed and refreshes the tutor's rating and review count.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.enums import NotificationType, RelatedModel, SessionStatus
from ..core.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotAuthorizedException,
    NotFoundException,
)
from ..models.review import Review
from ..models.session import TutoringSession
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db, clock)
        self.notification_service = notification_service or NotificationService(db, self.clock)
        self.repository = RepositoryFactory.create_review_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)

    @BaseService.measure_operation("create_review")
    def create_review(self, actor: Actor, session_id: str, rating: int, comment: str) -> Review:
        """
        Raises:
            NotFoundException: Session does not exist
            NotAuthorizedException: Actor is not the session's student
            BusinessRuleException: Session is not completed
            ConflictException: Session already reviewed
        """
        session: Optional[TutoringSession] = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", details={"session_id": session_id})
        if not (actor.is_student and session.student_id == actor.user_id):
            raise NotAuthorizedException("Only the session's student can review it")
        if session.status != SessionStatus.COMPLETED:
            raise BusinessRuleException(
                "Only completed sessions can be reviewed", code="SESSION_NOT_COMPLETED"
            )
        if session.reviewed or self.repository.exists(session_id=session.id):
            raise ConflictException("Session already reviewed", code="ALREADY_REVIEWED")

        with self.transaction():
            review = self.repository.create(
                session_id=session.id,
                student_id=actor.user_id,
                tutor_id=session.tutor_id,
                rating=rating,
                comment=comment,
            )
            session.reviewed = True
            mean, count = self.repository.rating_stats(session.tutor_id)
            tutor = session.tutor
            tutor.rating = round(mean, 1)
            tutor.review_count = count
            self.db.flush()

        self.log_operation(
            "create_review", session_id=session.id, tutor_id=session.tutor_id, rating=rating
        )
        self.notification_service.notify(
            recipient_id=session.tutor.user_id,
            notification_type=NotificationType.REVIEW,
            message=f"You received a {rating}-star review",
            sender_id=actor.user_id,
            related_id=review.id,
            related_model=RelatedModel.REVIEW,
        )
        return review

    @BaseService.measure_operation("pending_reviews")
    def pending_reviews(self, actor: Actor) -> List[TutoringSession]:
        """Completed sessions the student has not reviewed yet."""
        if not actor.is_student:
            raise NotAuthorizedException("Only students have pending reviews")
        return self.session_repository.get_unreviewed_completed(actor.user_id)

    def reviews_for_tutor(self, tutor_id: str) -> List[Review]:
        if self.tutor_repository.get_by_id(tutor_id, load_relationships=False) is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        return self.repository.get_for_tutor(tutor_id)
