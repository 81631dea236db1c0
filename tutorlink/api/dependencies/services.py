# tutorlink/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Every service gets the request's database session and the process clock;
tests override ``get_db`` and ``get_clock`` to pin both.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.clock import Clock, get_clock
from ...core.config import settings
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.conflict_checker import ConflictChecker
from ...services.earnings_service import EarningsService
from ...services.notification_service import NotificationService
from ...services.reporting_service import ReportingService
from ...services.review_service import ReviewService
from ...services.tutor_profile_service import TutorProfileService
from ...services.verification_service import VerificationService
from ...services.wishlist_service import WishlistService
from .database import get_db

logger = logging.getLogger(__name__)


def get_notification_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> NotificationService:
    return NotificationService(db, clock)


def get_conflict_checker(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> ConflictChecker:
    return ConflictChecker(db, clock)


def get_availability_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> AvailabilityService:
    return AvailabilityService(
        db,
        clock,
        conflict_checker=conflict_checker,
        granularity_minutes=settings.slot_granularity_minutes,
    )


def get_booking_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notification_service: NotificationService = Depends(get_notification_service),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session
        clock: Time source
        notification_service: Notification service for lifecycle messages
        conflict_checker: Overlap detection against active sessions

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        clock,
        notification_service=notification_service,
        conflict_checker=conflict_checker,
    )


def get_earnings_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> EarningsService:
    return EarningsService(db, clock)


def get_review_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notification_service: NotificationService = Depends(get_notification_service),
) -> ReviewService:
    return ReviewService(db, clock, notification_service=notification_service)


def get_verification_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notification_service: NotificationService = Depends(get_notification_service),
) -> VerificationService:
    return VerificationService(db, clock, notification_service=notification_service)


def get_reporting_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> ReportingService:
    return ReportingService(db, clock)


def get_tutor_profile_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notification_service: NotificationService = Depends(get_notification_service),
) -> TutorProfileService:
    return TutorProfileService(db, clock, notification_service=notification_service)


def get_wishlist_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> WishlistService:
    return WishlistService(db, clock)
