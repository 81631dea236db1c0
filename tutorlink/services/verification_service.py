# tutorlink/services/verification_service.py
"""
Tutor verification workflow.

Admins review pending tutor profiles and mark them verified or rejected.
Only verified tutors can be booked.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.enums import NotificationType, RelatedModel, VerificationStatus
from ..core.exceptions import NotAuthorizedException, NotFoundException, ValidationException
from ..models.tutor import TutorProfile
from ..principal import Actor
from ..repositories import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

VERIFIED_MESSAGE = "Your tutor profile has been verified! You can now receive session bookings."


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise NotAuthorizedException("Admin access required")


class VerificationService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db, clock)
        self.notification_service = notification_service or NotificationService(db, self.clock)
        self.tutor_repository = RepositoryFactory.create_tutor_repository(db)

    @BaseService.measure_operation("verify_tutor")
    def verify_tutor(
        self,
        actor: Actor,
        tutor_id: str,
        status: VerificationStatus,
        comment: Optional[str] = None,
    ) -> TutorProfile:
        _require_admin(actor)
        status = VerificationStatus(status)
        if status == VerificationStatus.PENDING:
            raise ValidationException("Verification status must be verified or rejected")

        tutor = self.tutor_repository.get_by_id(tutor_id)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})

        comment = comment.strip() if comment else None
        with self.transaction():
            tutor.verification_status = status.value
            tutor.verification_comment = comment
            tutor.verified_at = self.clock.now() if status == VerificationStatus.VERIFIED else None
            self.db.flush()

        self.log_operation(
            "verify_tutor", tutor_id=tutor.id, status=status.value, admin_id=actor.user_id
        )

        if status == VerificationStatus.VERIFIED:
            message = VERIFIED_MESSAGE
        else:
            message = f"Your tutor profile verification was rejected. Reason: {comment or 'not specified'}"
        self.notification_service.notify(
            recipient_id=tutor.user_id,
            notification_type=NotificationType.VERIFICATION,
            message=message,
            sender_id=actor.user_id,
            related_id=tutor.id,
            related_model=RelatedModel.TUTOR,
        )
        return tutor

    def pending_verifications(self, actor: Actor) -> List[TutorProfile]:
        _require_admin(actor)
        return self.tutor_repository.get_pending_verification()

    def verification_stats(self, actor: Actor) -> Dict[str, int]:
        _require_admin(actor)
        counts = self.tutor_repository.count_by_verification_status()
        stats = {status.value: counts.get(status.value, 0) for status in VerificationStatus}
        stats["total"] = sum(counts.values())
        return stats
