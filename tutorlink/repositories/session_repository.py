# tutorlink/repositories/session_repository.py
"""
Repository for tutoring sessions.

Listing, lookup and the aggregate queries used by earnings and admin
reporting.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import ACTIVE_SESSION_STATUSES, SessionStatus
from ..core.exceptions import RepositoryException
from ..models.session import TutoringSession
from ..models.tutor import TutorProfile
from .base_repository import BaseRepository

ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_SESSION_STATUSES]


class SessionRepository(BaseRepository[TutoringSession]):
    def __init__(self, db: Session):
        super().__init__(db, TutoringSession)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(TutoringSession.tutor).joinedload(TutorProfile.user),
            joinedload(TutoringSession.student),
        )

    def _ordered(self, query: Query) -> List[TutoringSession]:
        return (
            self._apply_eager_loading(query)
            .order_by(TutoringSession.session_date.asc(), TutoringSession.start_time.asc())
            .all()
        )

    def get_for_student(self, student_id: str) -> List[TutoringSession]:
        try:
            return self._ordered(
                self.db.query(TutoringSession).filter(TutoringSession.student_id == student_id)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing sessions for student {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to list sessions: {str(e)}")

    def get_for_tutor(self, tutor_id: str) -> List[TutoringSession]:
        try:
            return self._ordered(
                self.db.query(TutoringSession).filter(TutoringSession.tutor_id == tutor_id)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing sessions for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list sessions: {str(e)}")

    def get_all_sessions(self) -> List[TutoringSession]:
        try:
            return self._ordered(self.db.query(TutoringSession))
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing sessions: {str(e)}")
            raise RepositoryException(f"Failed to list sessions: {str(e)}")

    def get_active_for_tutor(self, tutor_id: str) -> List[TutoringSession]:
        try:
            return (
                self.db.query(TutoringSession)
                .filter(
                    TutoringSession.tutor_id == tutor_id,
                    TutoringSession.status.in_(ACTIVE_STATUS_VALUES),
                )
                .order_by(TutoringSession.session_date.asc(), TutoringSession.start_time.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing booked sessions for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list booked sessions: {str(e)}")

    def get_unreviewed_completed(self, student_id: str) -> List[TutoringSession]:
        try:
            return self._ordered(
                self.db.query(TutoringSession).filter(
                    TutoringSession.student_id == student_id,
                    TutoringSession.status == SessionStatus.COMPLETED.value,
                    TutoringSession.reviewed.is_(False),
                )
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing pending reviews for {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to list pending reviews: {str(e)}")

    # Reporting aggregates

    def count_by_status(self) -> Dict[str, int]:
        try:
            rows = (
                self.db.query(TutoringSession.status, func.count(TutoringSession.id))
                .group_by(TutoringSession.status)
                .all()
            )
            return {status: count for status, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting sessions by status: {str(e)}")
            raise RepositoryException(f"Failed to count sessions: {str(e)}")

    def top_subjects(self, limit: int) -> List[Tuple[str, int]]:
        try:
            count = func.count(TutoringSession.id)
            rows = (
                self.db.query(TutoringSession.subject, count)
                .group_by(TutoringSession.subject)
                .order_by(count.desc(), TutoringSession.subject.asc())
                .limit(limit)
                .all()
            )
            return [(subject, n) for subject, n in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting sessions by subject: {str(e)}")
            raise RepositoryException(f"Failed to count subjects: {str(e)}")

    def session_dates(self) -> List[date]:
        try:
            return [row[0] for row in self.db.query(TutoringSession.session_date).all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading session dates: {str(e)}")
            raise RepositoryException(f"Failed to load session dates: {str(e)}")

    def completed_revenue(self, tutor_id: Optional[str] = None) -> Decimal:
        try:
            query = self.db.query(func.coalesce(func.sum(TutoringSession.price), 0)).filter(
                TutoringSession.status == SessionStatus.COMPLETED.value
            )
            if tutor_id:
                query = query.filter(TutoringSession.tutor_id == tutor_id)
            return Decimal(str(query.scalar() or 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing revenue: {str(e)}")
            raise RepositoryException(f"Failed to sum revenue: {str(e)}")

    # Status transitions

    def update_status_if_current(
        self,
        session_id: str,
        current: SessionStatus,
        target: SessionStatus,
        **changes: Any,
    ) -> bool:
        """
        Compare-and-set the status of one session.

        The row is only written while it still holds ``current``; loaded
        instances are synchronized in place. Returns False when another
        request changed the status first.
        """
        try:
            updated = (
                self.db.query(TutoringSession)
                .filter(
                    TutoringSession.id == session_id,
                    TutoringSession.status == current.value,
                )
                .update({"status": target.value, **changes}, synchronize_session="fetch")
            )
            return bool(updated)
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating status of session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to update session status: {str(e)}")

    def get_status(self, session_id: str) -> Optional[str]:
        try:
            return (
                self.db.query(TutoringSession.status)
                .filter(TutoringSession.id == session_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading status of session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to read session status: {str(e)}")

    def student_ids_with_upcoming(self, tutor_id: str, from_date: date) -> List[str]:
        """Students holding an active session with the tutor on or after ``from_date``."""
        try:
            rows = (
                self.db.query(TutoringSession.student_id)
                .filter(
                    TutoringSession.tutor_id == tutor_id,
                    TutoringSession.status.in_(ACTIVE_STATUS_VALUES),
                    TutoringSession.session_date >= from_date,
                )
                .distinct()
                .all()
            )
            return [row[0] for row in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing students of tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list students: {str(e)}")
