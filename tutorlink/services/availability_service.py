# tutorlink/services/availability_service.py
"""
Availability Service for TutorLink

Owns a tutor's weekly availability (one window per weekday) and turns it
into bookable slots for a concrete date, minus times already taken by
pending or confirmed sessions.
"""

from datetime import date
import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.clock import Clock
from ..core.config import settings
from ..core.enums import DayOfWeek
from ..core.exceptions import (
    NotAuthorizedException,
    NotFoundException,
    TutorUnavailableException,
    ValidationException,
)
from ..domain.availability import (
    AvailabilityWindow,
    day_of,
    format_hhmm,
    iter_slots,
)
from ..domain.conflicts import has_conflict, session_interval
from ..models.tutor import TutorProfile
from ..principal import Actor
from ..repositories import RepositoryFactory
from ..repositories.tutor_repository import TutorRepository
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        tutor_repository: Optional[TutorRepository] = None,
        granularity_minutes: Optional[int] = None,
    ):
        super().__init__(db, clock)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.clock)
        self.tutor_repository = tutor_repository or RepositoryFactory.create_tutor_repository(db)
        self.granularity_minutes = granularity_minutes or settings.slot_granularity_minutes

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(self, tutor_id: str, target_date: date) -> List[str]:
        """
        Bookable start times for a tutor on a date, as ``HH:MM`` strings.

        A slot is dropped when ``[t, t + granularity)`` overlaps an active
        session. Unknown or unverified tutors cannot be booked.

        Raises:
            TutorUnavailableException: Tutor missing or not verified
        """
        tutor = self.tutor_repository.get_verified(tutor_id)
        if tutor is None:
            raise TutorUnavailableException(tutor_id)

        window = tutor.window_for(day_of(target_date))
        if window is None:
            return []

        taken = self.conflict_checker.get_active_intervals(tutor.id, target_date)
        return [
            format_hhmm(slot)
            for slot in iter_slots(window, self.granularity_minutes)
            if not has_conflict(*session_interval(slot, self.granularity_minutes), taken)
        ]

    def get_availability(self, tutor_id: str) -> List[AvailabilityWindow]:
        tutor = self.tutor_repository.get_by_id(tutor_id)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        return self._ordered([row.to_window() for row in tutor.availability])

    @BaseService.measure_operation("replace_availability")
    def replace_availability(
        self, actor: Actor, tutor_id: str, windows: Sequence[AvailabilityWindow]
    ) -> List[AvailabilityWindow]:
        """
        Replace a tutor's weekly windows wholesale.

        Entries without a start or end time are dropped. Duplicate weekdays
        and windows whose start is not before their end are rejected.
        """
        tutor = self.tutor_repository.get_by_id(tutor_id)
        if tutor is None:
            raise NotFoundException("Tutor not found", details={"tutor_id": tutor_id})
        self._ensure_can_edit(actor, tutor)

        kept = [w for w in windows if w.start_time is not None and w.end_time is not None]
        seen = set()
        for window in kept:
            if window.day_of_week in seen:
                raise ValidationException(
                    f"Duplicate availability for {window.day_of_week.value}",
                    details={"day_of_week": window.day_of_week.value},
                )
            seen.add(window.day_of_week)
            if not window.is_bookable:
                raise ValidationException(
                    f"Start time must be before end time for {window.day_of_week.value}",
                    details={"day_of_week": window.day_of_week.value, "window": window.describe()},
                )

        with self.transaction():
            self.tutor_repository.replace_windows(tutor, kept)

        self.log_operation(
            "replace_availability",
            tutor_id=tutor.id,
            actor_id=actor.user_id,
            days=[w.day_of_week.value for w in kept],
        )
        return self._ordered(kept)

    @staticmethod
    def _ensure_can_edit(actor: Actor, tutor: TutorProfile) -> None:
        if actor.is_admin:
            return
        if actor.is_tutor and tutor.user_id == actor.user_id:
            return
        raise NotAuthorizedException("Only the tutor or an admin can change availability")

    @staticmethod
    def _ordered(windows: List[AvailabilityWindow]) -> List[AvailabilityWindow]:
        order = list(DayOfWeek)
        return sorted(windows, key=lambda w: order.index(w.day_of_week))
