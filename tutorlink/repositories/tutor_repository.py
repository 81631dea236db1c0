# tutorlink/repositories/tutor_repository.py
"""
Repository for tutor profiles, their subjects and weekly availability.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import VerificationStatus
from ..core.exceptions import RepositoryException
from ..domain.availability import AvailabilityWindow
from ..models.tutor import TutorProfile, TutorSubject, WeeklyAvailability
from .base_repository import BaseRepository


class TutorRepository(BaseRepository[TutorProfile]):
    def __init__(self, db: Session):
        super().__init__(db, TutorProfile)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(TutorProfile.user))

    def get_by_user_id(self, user_id: str) -> Optional[TutorProfile]:
        try:
            return (
                self.db.query(TutorProfile)
                .options(joinedload(TutorProfile.user))
                .filter(TutorProfile.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor profile for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve tutor profile: {str(e)}")

    def get_verified(self, tutor_id: str) -> Optional[TutorProfile]:
        """Profile by id, only if verified."""
        try:
            return (
                self.db.query(TutorProfile)
                .options(joinedload(TutorProfile.user))
                .filter(
                    TutorProfile.id == tutor_id,
                    TutorProfile.verification_status == VerificationStatus.VERIFIED.value,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting verified tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve tutor: {str(e)}")

    def search_verified(
        self,
        subject: Optional[str] = None,
        city: Optional[str] = None,
        min_rate: Optional[Decimal] = None,
        max_rate: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[TutorProfile], int]:
        """
        Verified tutors matching every given filter, best rated first.

        Subject matches any taught subject by case-insensitive substring;
        city matches case-insensitively. Returns (page, total matches).
        """
        try:
            query = self.db.query(TutorProfile).filter(
                TutorProfile.verification_status == VerificationStatus.VERIFIED.value
            )
            if subject:
                query = query.filter(
                    TutorProfile.subjects.any(
                        func.lower(TutorSubject.name).contains(subject.lower(), autoescape=True)
                    )
                )
            if city:
                query = query.filter(func.lower(TutorProfile.city) == city.lower())
            if min_rate is not None:
                query = query.filter(TutorProfile.hourly_rate >= min_rate)
            if max_rate is not None:
                query = query.filter(TutorProfile.hourly_rate <= max_rate)
            if min_rating is not None:
                query = query.filter(TutorProfile.rating >= min_rating)

            total = query.count()
            tutors = (
                query.options(joinedload(TutorProfile.user))
                .order_by(
                    TutorProfile.rating.desc(),
                    TutorProfile.review_count.desc(),
                    TutorProfile.id.asc(),
                )
                .offset(skip)
                .limit(limit)
                .all()
            )
            return tutors, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching tutors: {str(e)}")
            raise RepositoryException(f"Failed to search tutors: {str(e)}")

    def get_pending_verification(self) -> List[TutorProfile]:
        try:
            return (
                self.db.query(TutorProfile)
                .options(joinedload(TutorProfile.user))
                .filter(TutorProfile.verification_status == VerificationStatus.PENDING.value)
                .order_by(TutorProfile.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing pending verifications: {str(e)}")
            raise RepositoryException(f"Failed to list pending verifications: {str(e)}")

    def count_by_verification_status(self) -> Dict[str, int]:
        try:
            rows = (
                self.db.query(TutorProfile.verification_status, func.count(TutorProfile.id))
                .group_by(TutorProfile.verification_status)
                .all()
            )
            return {status: count for status, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting verification statuses: {str(e)}")
            raise RepositoryException(f"Failed to count tutors: {str(e)}")

    def average_rating(self) -> float:
        """Mean rating over tutors that have at least one review."""
        try:
            value = (
                self.db.query(func.avg(TutorProfile.rating))
                .filter(TutorProfile.review_count > 0)
                .scalar()
            )
            return float(value or 0.0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error averaging tutor ratings: {str(e)}")
            raise RepositoryException(f"Failed to average ratings: {str(e)}")

    # Availability

    def get_windows(self, tutor_id: str) -> List[WeeklyAvailability]:
        try:
            return (
                self.db.query(WeeklyAvailability)
                .filter(WeeklyAvailability.tutor_id == tutor_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting availability for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve availability: {str(e)}")

    def replace_windows(
        self, tutor: TutorProfile, windows: Sequence[AvailabilityWindow]
    ) -> List[WeeklyAvailability]:
        """Swap the tutor's weekly windows for ``windows`` in one flush."""
        try:
            tutor.availability.clear()
            # Deletes must reach the database before the unique (tutor, day) rows are re-added
            self.db.flush()
            rows = [
                WeeklyAvailability(
                    tutor_id=tutor.id,
                    day_of_week=window.day_of_week.value,
                    start_time=window.start_time,
                    end_time=window.end_time,
                )
                for window in windows
            ]
            tutor.availability.extend(rows)
            self.db.flush()
            return rows
        except SQLAlchemyError as e:
            self.logger.error(f"Error replacing availability for tutor {tutor.id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to save availability: {str(e)}")

    # Subjects

    def replace_subjects(
        self, tutor: TutorProfile, subjects: Sequence[Tuple[str, str]]
    ) -> List[TutorSubject]:
        """Swap the tutor's subjects for ``(name, proficiency_level)`` pairs."""
        try:
            tutor.subjects.clear()
            self.db.flush()
            rows = [
                TutorSubject(tutor_id=tutor.id, name=name, proficiency_level=level)
                for name, level in subjects
            ]
            tutor.subjects.extend(rows)
            self.db.flush()
            return rows
        except SQLAlchemyError as e:
            self.logger.error(f"Error replacing subjects for tutor {tutor.id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to save subjects: {str(e)}")
