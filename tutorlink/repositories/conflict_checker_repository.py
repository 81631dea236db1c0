# tutorlink/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for TutorLink

Fetches the sessions that can block a booking: a tutor's pending or
confirmed sessions on one date. Completed and cancelled sessions never
block.
"""

from datetime import date
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import ACTIVE_SESSION_STATUSES
from ..core.exceptions import RepositoryException
from ..models.session import TutoringSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_SESSION_STATUSES]


class ConflictCheckerRepository(BaseRepository[TutoringSession]):
    def __init__(self, db: Session):
        super().__init__(db, TutoringSession)
        self.logger = logging.getLogger(__name__)

    def get_active_sessions_for_date(
        self, tutor_id: str, check_date: date
    ) -> List[TutoringSession]:
        """Active sessions of a tutor on a date, earliest first."""
        try:
            query = self.db.query(TutoringSession).filter(
                TutoringSession.tutor_id == tutor_id,
                TutoringSession.session_date == check_date,
                TutoringSession.status.in_(ACTIVE_STATUS_VALUES),
            )
            return query.order_by(TutoringSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get sessions for conflict check: {str(e)}")
