# tutorlink/services/conflict_checker.py
"""
Conflict Checker Service for TutorLink

Loads a tutor's active sessions for a date and asks the pure overlap
predicate whether a candidate interval collides with any of them.
"""

from datetime import date, time
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..domain.availability import format_hhmm
from ..domain.conflicts import Interval, has_conflict, session_interval
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Only pending and confirmed sessions of the same tutor on the same date
    can conflict; back-to-back sessions never do.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        repository: Optional[ConflictCheckerRepository] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    def get_active_intervals(self, tutor_id: str, check_date: date) -> List[Interval]:
        sessions = self.repository.get_active_sessions_for_date(tutor_id, check_date)
        return [session_interval(s.start_time, s.duration_minutes) for s in sessions]

    @BaseService.measure_operation("check_time_conflicts")
    def check_time_conflicts(
        self,
        tutor_id: str,
        check_date: date,
        start_time: time,
        duration_minutes: int,
    ) -> bool:
        """
        Check whether a candidate session overlaps an active one.

        Returns:
            True if there is a conflict
        """
        start, end = session_interval(start_time, duration_minutes)
        existing = self.get_active_intervals(tutor_id, check_date)
        conflict = has_conflict(start, end, existing)
        if conflict:
            self.logger.info(
                f"Conflict for tutor {tutor_id} on {check_date} at {format_hhmm(start_time)}"
            )
        return conflict
